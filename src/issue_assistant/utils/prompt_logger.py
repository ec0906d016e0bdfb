"""
Prompt logging utility for debugging the research pipeline.
Writes each step prompt and result to console and/or file.
"""
import os
import re
import logging
from datetime import datetime
from typing import Optional, Dict, Any
from pathlib import Path

logger = logging.getLogger(__name__)

# Configuration from environment
PROMPT_LOG_ENABLED = os.environ.get("PROMPT_LOG_ENABLED", "false").lower() == "true"
PROMPT_LOG_TO_FILE = os.environ.get("PROMPT_LOG_TO_FILE", "true").lower() == "true"
PROMPT_LOG_TO_CONSOLE = os.environ.get("PROMPT_LOG_TO_CONSOLE", "false").lower() == "true"
PROMPT_LOG_DIR = os.environ.get("PROMPT_LOG_DIR", "/tmp/issue_assistant_prompts")
PROMPT_LOG_MAX_FILES = int(os.environ.get("PROMPT_LOG_MAX_FILES", "50"))

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


class PromptLogger:
    """
    Logger for the full prompts sent to the LLM at each pipeline step.
    """

    @classmethod
    def log_prompt(
        cls,
        prompt: str,
        metadata: Optional[Dict[str, Any]] = None,
        stage: str = "prompt"
    ) -> Optional[str]:
        """
        Log a prompt for debugging.

        Args:
            prompt: The full prompt text
            metadata: Optional metadata (repo, mode, model, ...)
            stage: Step identifier (e.g. "answered_issues", "final_response")

        Returns:
            Path to log file if written, None otherwise
        """
        if not PROMPT_LOG_ENABLED:
            return None

        metadata = metadata or {}
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")

        header_lines = [
            "=" * 80,
            f"PROMPT LOG - {stage.upper()}",
            f"Timestamp: {datetime.now().isoformat()}",
            "=" * 80,
        ]

        if metadata:
            header_lines.append("METADATA:")
            for key, value in metadata.items():
                header_lines.append(f"  {key}: {value}")
            header_lines.append("-" * 80)

        header_lines.extend([
            "STATISTICS:",
            f"  Prompt length: {len(prompt)} chars",
            f"  Estimated tokens: ~{int(len(prompt) * 0.25)}",
            "-" * 80,
        ])

        header = "\n".join(header_lines)
        footer = "\n" + "=" * 80 + "\nEND PROMPT LOG\n" + "=" * 80
        full_log = f"{header}\n{prompt}{footer}"

        log_file_path = None

        if PROMPT_LOG_TO_CONSOLE:
            print(full_log)

        if PROMPT_LOG_TO_FILE:
            log_file_path = cls._write_to_file(full_log, metadata, timestamp, stage)

        logger.info(
            f"[PROMPT_LOG] {stage} | repo={metadata.get('repo', 'unknown')} | "
            f"chars={len(prompt)} | est_tokens=~{int(len(prompt) * 0.25)}"
        )

        return log_file_path

    @classmethod
    def log_step_result(
        cls,
        result: Optional[str],
        metadata: Optional[Dict[str, Any]] = None,
        stage: str = "result"
    ) -> Optional[str]:
        """Log the text a step produced (None when the model returned nothing)."""
        if not PROMPT_LOG_ENABLED:
            return None

        text = result if result is not None else "<no text returned>"
        lines = [
            f"STEP RESULT ({stage.upper()}):",
            f"Result length: {len(text)} chars",
            "-" * 40,
            text
        ]
        return cls.log_prompt("\n".join(lines), metadata, f"{stage}_result")

    @classmethod
    def _write_to_file(
        cls,
        content: str,
        metadata: Optional[Dict[str, Any]],
        timestamp: str,
        stage: str
    ) -> Optional[str]:
        """Write log content to file."""
        try:
            log_dir = Path(PROMPT_LOG_DIR)
            log_dir.mkdir(parents=True, exist_ok=True)

            repo = str((metadata or {}).get("repo", "unknown"))
            safe_repo = _UNSAFE_FILENAME_CHARS.sub("_", repo)
            filepath = log_dir / f"{timestamp}_{safe_repo}_{stage}.log"

            with open(filepath, "w", encoding="utf-8") as f:
                f.write(content)

            cls._cleanup_old_files(log_dir)

            logger.debug(f"Prompt logged to: {filepath}")
            return str(filepath)

        except Exception as e:
            logger.warning(f"Failed to write prompt log: {e}")
            return None

    @classmethod
    def _cleanup_old_files(cls, log_dir: Path) -> None:
        """Remove oldest log files if exceeding max count."""
        try:
            log_files = sorted(log_dir.glob("*.log"), key=lambda f: f.stat().st_mtime)

            if len(log_files) > PROMPT_LOG_MAX_FILES:
                files_to_remove = log_files[:-PROMPT_LOG_MAX_FILES]
                for f in files_to_remove:
                    f.unlink()
                logger.debug(f"Cleaned up {len(files_to_remove)} old prompt log files")

        except Exception as e:
            logger.warning(f"Failed to cleanup old prompt logs: {e}")
