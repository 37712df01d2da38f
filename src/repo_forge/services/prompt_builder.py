"""Prompt templates — pure functions from repository context to prompt text.

Nothing here performs I/O or reads the clock, so identical inputs always
produce byte-identical prompts.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from repo_forge.domain.entities import RepoMetadata, TreeEntry

MAX_TREE_PATHS = 300

# ── Templates ───────────────────────────────────────────────────────────────

CODE_SUMMARY_TEMPLATE = """\
You are an expert code reviewer.

Perform the following on the provided code:
1) Summarize the code in simple words.
2) Explain what it does step-by-step.
3) Highlight potential bugs or issues.
4) Suggest improvements.
5) Rate code quality out of 10.

CODE:
{code}

OUTPUT FORMAT (JSON ONLY):
{{
  "summary": "...",
  "explanation": "Step-by-step explanation...",
  "issues": ["Issue 1", "Issue 2"],
  "improvements": ["Improvement 1", "Improvement 2"],
  "quality_score": 7
}}
"""

README_TEMPLATE = """\
You are an expert engineering documentation writer.

Generate a structured JSON ONLY.

Repo: {full_name}
Description: {description}
Owner: {owner}
License: {license}

Languages: {languages}

FILES:
{file_blocks}

TASK:
Return ONLY valid JSON.
The "readme_markdown" must be a comprehensive, professional README.md file content.
It MUST contain at least 8 sections, including but not limited to:
1. Title & Description (with badges if possible)
2. Features
3. Tech Stack
4. Installation / Getting Started
5. Usage
6. Environment Variables (if detected)
7. Contributing
8. License
9. Author / Acknowledgments

The "summary" should be a concise 2-3 sentence overview of what the project does.

JSON Structure:
{{
  "summary": "...",
  "readme_markdown": "... FULL README MARKDOWN CONTENT HERE ...",
  "mermaid": "graph TD; ...",
  "tech_stack": ["React", "Node", ...],
  "detected_scripts": {{}},
  "notes": ""
}}
"""

ARCHITECTURE_TEMPLATE = """\
You are a Senior Software Architect.
Analyze the following GitHub repository.

REPO: {full_name}
DESC: {description}

FILE STRUCTURE (Partial):
{tree_list}

SELECTED FILE CONTENTS:
{file_blocks}

TASK:
Provide a comprehensive architectural analysis in JSON format.

REQUIREMENTS:
1. Analyze the tech stack, design patterns, and structure.
2. Identify the "Layers" (e.g., Presentation, Business Logic, Data Access).
3. List "Key Components" and their responsibilities.
4. Describe the "Data Flow" (how data moves through the app).
5. Create a "Mermaid" diagram code (graph TD) representing the high-level architecture.
6. Identify "Potential Issues" (scalability, security, maintainability).
7. Write a concise "Summary".

OUTPUT FORMAT (JSON ONLY):
{{
  "summary": "...",
  "layers": ["Layer 1", "Layer 2"],
  "key_components": ["Comp1: does X", "Comp2: does Y"],
  "data_flow": "Description of flow...",
  "potential_issues": ["Issue 1", "Issue 2"],
  "tree_mermaid": "graph TD; A[Client] --> B[Server]; ..."
}}
"""

SEARCH_TEMPLATE = """\
You are a Codebase Explorer Assistant.
User Query: "{query}"

REPO: {full_name}
DESC: {description}

FILE STRUCTURE (Partial):
{tree_list}

README (Partial):
{readme}

TASK:
Answer the user's question based on the file structure and README.
If they ask where code is located, point to specific files.
If they ask about functionality, infer from file names and README.
Keep the answer concise and helpful.

OUTPUT FORMAT (JSON ONLY):
{{
  "answer": "...",
  "relevant_files": ["path/to/file"]
}}
"""

# ── Helpers ─────────────────────────────────────────────────────────────────


def render_tree_list(entries: Sequence[TreeEntry], limit: int = MAX_TREE_PATHS) -> str:
    """Newline-joined file paths (directories omitted), capped at *limit*."""
    return "\n".join([e.path for e in entries if e.is_file][:limit])


def render_file_blocks(files: Mapping[str, str]) -> str:
    """One ``----- FILE: <path> -----`` block per snapshot entry."""
    return "\n".join(
        f"----- FILE: {path} -----\n{content}\n" for path, content in files.items()
    )


def _or_unspecified(value: str | None) -> str:
    return value if value else "Not specified"


# ── Builders ────────────────────────────────────────────────────────────────


def build_code_summary_prompt(code: str) -> str:
    return CODE_SUMMARY_TEMPLATE.format(code=code)


def build_readme_prompt(
    metadata: RepoMetadata,
    languages: Mapping[str, int],
    files: Mapping[str, str],
) -> str:
    return README_TEMPLATE.format(
        full_name=metadata.full_name,
        description=_or_unspecified(metadata.description),
        owner=metadata.owner,
        license=_or_unspecified(metadata.license),
        languages=", ".join(languages) or "Not specified",
        file_blocks=render_file_blocks(files),
    )


def build_architecture_prompt(
    metadata: RepoMetadata,
    entries: Sequence[TreeEntry],
    files: Mapping[str, str],
) -> str:
    return ARCHITECTURE_TEMPLATE.format(
        full_name=metadata.full_name,
        description=_or_unspecified(metadata.description),
        tree_list=render_tree_list(entries),
        file_blocks=render_file_blocks(files),
    )


def build_search_prompt(
    metadata: RepoMetadata,
    entries: Sequence[TreeEntry],
    readme: str,
    query: str,
) -> str:
    return SEARCH_TEMPLATE.format(
        query=query,
        full_name=metadata.full_name,
        description=_or_unspecified(metadata.description),
        tree_list=render_tree_list(entries),
        readme=readme,
    )
