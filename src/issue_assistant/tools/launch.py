"""
Launch configuration for the GitHub MCP server.

The access token reaches the server in one of two ways:
- direct execution (npx, a local binary): as an environment variable of the
  spawned process
- container execution (docker): as an explicit `-e NAME=value` argument placed
  before the image name, since the container does not inherit the parent's
  environment
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

DIRECT_TOKEN_ENV_VAR = "GITHUB_TOKEN"
CONTAINER_TOKEN_ENV_VAR = "GITHUB_PERSONAL_ACCESS_TOKEN"

SERVER_NAME = "github"


@dataclass
class LaunchPlan:
    command: str
    args: List[str]
    env: Optional[Dict[str, str]] = None
    secret: Optional[str] = field(default=None, repr=False)

    def masked_args(self) -> List[str]:
        """Arguments with the token replaced, safe for logging."""
        if not self.secret:
            return list(self.args)
        return [arg.replace(self.secret, "***") for arg in self.args]

    def describe(self) -> str:
        return " ".join([self.command] + self.masked_args())


def is_container_command(command: str) -> bool:
    return "docker" in (command or "").lower()


def insert_container_env_argument(args: List[str], name: str, value: str) -> List[str]:
    """
    Insert `-e NAME=value` before the image argument of a `docker run` list.

    Heuristic: the image is the last argument that is not a flag, and only
    counts as found when it is also the final argument. Anything else (a
    trailing flag, a command after the image) is ambiguous, so the pair is
    appended at the end and a warning logged.
    """
    result = list(args)
    image_index = -1
    for index in range(len(result) - 1, -1, -1):
        if not result[index].startswith("-"):
            image_index = index
            break

    if image_index != -1 and image_index == len(result) - 1:
        result[image_index:image_index] = ["-e", f"{name}={value}"]
        logger.info(f"Inserted -e {name}=*** before arg index {image_index}")
    else:
        logger.warning(
            f"Could not reliably determine the container image position in arguments "
            f"{' '.join(result)}. Appending -e {name}=***. Verify MCP_GITHUB_ARGS."
        )
        result.extend(["-e", f"{name}={value}"])
    return result


def build_launch_plan(command: str, args: List[str], token: Optional[str]) -> LaunchPlan:
    """Build the command line and environment for the MCP server process."""
    args = list(args or [])

    if is_container_command(command):
        logger.info(f"Using container command. Token will be passed as {CONTAINER_TOKEN_ENV_VAR}")
        if token:
            args = insert_container_env_argument(args, CONTAINER_TOKEN_ENV_VAR, token)
        else:
            logger.warning(
                f"GitHub PAT is not configured. {CONTAINER_TOKEN_ENV_VAR} will not be passed "
                f"to the container. Server might fail to authenticate."
            )
        return LaunchPlan(command=command, args=args, env=None, secret=token or None)

    logger.info(f"Using direct command. Token will be set as {DIRECT_TOKEN_ENV_VAR}")
    env = None
    if token:
        env = {DIRECT_TOKEN_ENV_VAR: token}
    else:
        logger.warning(
            f"GitHub PAT is not configured. {DIRECT_TOKEN_ENV_VAR} will not be set "
            f"for the process. Server might fail to authenticate."
        )
    return LaunchPlan(command=command, args=args, env=env, secret=token or None)


def build_client_config(plan: LaunchPlan) -> dict:
    """Render a launch plan as an mcp_use client configuration."""
    server = {
        "command": plan.command,
        "args": list(plan.args),
    }
    if plan.env:
        server["env"] = dict(plan.env)

    return {
        "mcpServers": {
            SERVER_NAME: server
        }
    }
