"""Define Generation Tools — Anthropic tool schema for structured project output.

Invariants:
    - Schema follows Anthropic tool_use format
    - Required fields mirror GenerationPayload (schemas/generation.py)
    - The client forces this tool via tool_choice, so every successful reply is one tool_use block

Design Decisions:
    - Forced tool over free-text JSON: the SDK hands back parsed input, no fence stripping
"""

EMIT_PROJECT_TOOL_NAME = "emit_project"

TOOL_EMIT_PROJECT = {
    "name": EMIT_PROJECT_TOOL_NAME,
    "description": """Emit the complete, updated application as a project snapshot.

Always emit the WHOLE project: every file, not a diff. Files omitted here are deleted from the workspace.

previewHtml must be a single self-contained HTML document that renders the application on its own (CDN scripts allowed, no local imports).""",
    "input_schema": {
        "type": "object",
        "properties": {
            "previewHtml": {
                "type": "string",
                "description": "Self-contained HTML document rendering the application. Tailwind CSS via CDN; React/ReactDOM + Babel standalone via CDN when interactivity is needed."
            },
            "files": {
                "type": "array",
                "description": "Source files representing the project structure, in display order",
                "items": {
                    "type": "object",
                    "properties": {
                        "name": {
                            "type": "string",
                            "description": "File path, e.g. 'src/App.tsx'. Unique within the project."
                        },
                        "language": {
                            "type": "string",
                            "description": "Language tag, e.g. 'typescript', 'css', 'html'"
                        },
                        "content": {
                            "type": "string",
                            "description": "The full file content"
                        }
                    },
                    "required": ["name", "language", "content"]
                }
            },
            "explanation": {
                "type": "string",
                "description": "Brief, friendly explanation of what was built or changed"
            }
        },
        "required": ["previewHtml", "files", "explanation"]
    }
}
