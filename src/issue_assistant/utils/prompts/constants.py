"""
Shared constants and instruction templates for the research pipeline prompts.
"""

RESEARCH_BACKGROUND = "Background: You are an AI assistant helping to research a GitHub issue."

# Repeated in every tool-using prompt; the GitHub MCP server rejects numbers sent as strings
NUMERIC_PARAMETER_INSTRUCTIONS = (
    "When using tools that accept numeric parameters such as 'per_page', 'page' or 'issue_number', "
    "pass them as JSON numbers (per_page: 3), never as strings (per_page: \"3\")."
)

RESEARCH_HANDOFF = (
    "Your response will be used as context for another AI to draft a final response to the original issue."
)

NO_INVENTION_INSTRUCTIONS = "Do not invent information not present in the context provided."

# Lets the model locate repository and issue inside a raw webhook payload
PAYLOAD_INFERENCE_INSTRUCTIONS = """The GitHub webhook payload below describes the issue. Read it to determine:
- the repository owner and name (repository.owner.login and repository.name, or repository.full_name)
- the issue number (issue.number)
- the issue title and body (issue.title, issue.body)
Use these values as tool parameters. Do not guess values that are not in the payload."""


ANSWERED_ISSUES_TEMPLATE = """{background}
Task: Search for GitHub issues in the repository '{repo}' that are similar to the following issue context: '{issue}'.
Focus on issues that are already CLOSED or RESOLVED.
Instructions: Provide a summary of up to 3 most relevant issues found. For each, include its title, number, and a brief of its resolution.
{numeric_instructions}
If no relevant closed/resolved issues are found, clearly state that.
{handoff}
"""

OPEN_ISSUES_TEMPLATE = """{background}
Task: Search for OPEN GitHub issues in the repository '{repo}' that might be related to the following issue context: '{issue}'.
Instructions: Provide a summary of up to 3 most relevant open issues. For each, include its title and number.
{numeric_instructions}
If no relevant open issues are found, clearly state that.
{handoff}
"""

CODE_SEARCH_TEMPLATE = """{background}
Task: Search the codebase of the GitHub repository '{repo}' for code snippets, comments, or documentation relevant to the following issue context: '{issue}'.
Instructions: Summarize any key findings. If specific file paths or code blocks are identified as highly relevant, mention them. Limit to 3 most relevant findings.
{numeric_instructions}
If no relevant code is found, clearly state that.
{handoff}
"""

CREATE_ISSUE_TEMPLATE = """Background: You are an AI assistant helping to manage GitHub issues. Based on the research conducted for an incoming issue, you need to create a new, well-summarized issue in the repository '{repo}'.

Original Issue Context Provided:
'''{issue}'''

Research Summary:
1. Similar Answered/Closed Issues: {answered_issues}
2. Related Outstanding/Open Issues: {open_issues}
3. Relevant Code Search Results: {code_search}

Task:
1. Synthesize the information above to create a new GitHub issue.
2. The issue title should be concise and reflect the core problem derived from the original context and research.
3. The issue body should provide a clear summary of the problem, referencing the key findings from the research (answered issues, open issues, code findings).
4. Structure the body for clarity. Use markdown.
5. Your primary goal is to create an issue that a developer can understand and act upon.
Instructions:
- Use the available tools to create this issue in the repository '{repo}'.
- {numeric_instructions}
- After creating the issue, output the URL or identifier of the newly created issue. If creation fails or is not possible, state that clearly.
"""

FINAL_RESPONSE_TEMPLATE = """You are an AI assistant tasked with drafting a helpful and context-aware response to a new GitHub issue.

Original Issue Context Provided:
'''{issue}'''

Repository: {repo}

Here is the background research conducted to help you formulate the response:

1. Similar Answered/Closed Issues Found:
'''
{answered_issues}
'''

2. Related Outstanding/Open Issues Found:
'''
{open_issues}
'''

3. Relevant Code Search Results from the Repository:
'''
{code_search}
'''

4. Action Taken: A new GitHub issue has been created based on this research.
   Details: {created_issue}

Task:
Based *only* on the Original Issue Context and the Background Research provided above (including the result of the new issue creation), please draft a comprehensive and helpful response.
Your response should be suitable for posting as a comment on the GitHub issue that *triggered this process*.
Address the user who might have reported the issue. Be empathetic and constructive.
Inform the user that a new issue has been created to track this (if successful, refer to the details above).
If the research yielded no specific results for some steps, acknowledge that tactfully if relevant, and formulate the best possible response with the available information.
{no_invention}
Structure your response clearly. You can use markdown for formatting.
"""


PAYLOAD_ANSWERED_ISSUES_TEMPLATE = """{background}
{payload_instructions}

Webhook payload:
'''
{payload}
'''

Task: Search the repository named in the payload for issues similar to the one described. Focus on issues that are already CLOSED or RESOLVED. Exclude the issue from the payload itself.
Instructions: Provide a summary of up to 3 most relevant issues found. For each, include its title, number, and a brief of its resolution.
{numeric_instructions}
If no relevant closed/resolved issues are found, clearly state that.
{handoff}
"""

PAYLOAD_OPEN_ISSUES_TEMPLATE = """{background}
{payload_instructions}

Webhook payload:
'''
{payload}
'''

Task: Search the repository named in the payload for OPEN issues that might be related to the one described. Exclude the issue from the payload itself.
Instructions: Provide a summary of up to 3 most relevant open issues. For each, include its title and number.
{numeric_instructions}
If no relevant open issues are found, clearly state that.
{handoff}
"""

PAYLOAD_CODE_SEARCH_TEMPLATE = """{background}
{payload_instructions}

Webhook payload:
'''
{payload}
'''

Task: Search the codebase of the repository named in the payload for code snippets, comments, or documentation relevant to the issue described.
Instructions: Summarize any key findings. If specific file paths or code blocks are identified as highly relevant, mention them. Limit to 3 most relevant findings.
{numeric_instructions}
If no relevant code is found, clearly state that.
{handoff}
"""

PAYLOAD_FINAL_RESPONSE_TEMPLATE = """You are an AI assistant tasked with drafting a helpful and context-aware comment for a GitHub issue.

The issue is described by this GitHub webhook payload:
'''
{payload}
'''

Here is the background research conducted to help you formulate the comment:

1. Similar Answered/Closed Issues Found:
'''
{answered_issues}
'''

2. Related Outstanding/Open Issues Found:
'''
{open_issues}
'''

3. Relevant Code Search Results from the Repository:
'''
{code_search}
'''

Task:
Based *only* on the issue in the payload and the Background Research provided above, draft a comprehensive and helpful comment to post on that issue.
Address the user who reported the issue. Be empathetic and constructive.
If the research yielded no specific results for some steps, acknowledge that tactfully if relevant, and formulate the best possible response with the available information.
{no_invention}
Output only the comment text, in markdown, with no preamble.
"""

PAYLOAD_POST_COMMENT_TEMPLATE = """Background: You are an AI assistant that posts comments on GitHub issues.
{payload_instructions}

Webhook payload:
'''
{payload}
'''

Comment to post (post it verbatim, do not modify it):
'''
{final_response}
'''

Task:
1. Determine the repository owner, repository name and issue number from the payload.
2. Use the available tools to add the comment above to that issue.
3. {numeric_instructions}

Output exactly one line:
- "Comment posting succeeded: <URL or identifier of the comment>" if the comment was posted, or
- "Comment posting failed: <reason>" if it could not be posted (for example a tool error or missing values in the payload).
"""
