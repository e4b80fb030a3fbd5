"""System prompts sent to extraction providers."""
from __future__ import annotations

from kanbanflow.model.entities import Priority, Tag

_PRIORITIES = ", ".join(f"'{p.value}'" for p in Priority)
_TAGS = ", ".join(f"'{t.value}'" for t in Tag)

# Used with providers that accept a response schema.
SCHEMA_SYSTEM_PROMPT = f"""You are a helpful project manager assistant.
Extract a list of tasks from the user's input.
For each task, provide:
- title: A concise summary of the task.
- description: A brief explanation (optional, empty string if none).
- priority: One of {_PRIORITIES} (infer from context, default to 'Medium').
- tag: One of {_TAGS} (infer from context, default to 'Feature').

Strictly adhere to the JSON schema."""

# Used with chat-completion providers that only see plain text.
JSON_ONLY_SYSTEM_PROMPT = f"""You are a specialized JSON generator. You extract tasks from text.

RULES:
1. Output ONLY a valid JSON array. No text before or after.
2. No markdown formatting (no ```json).
3. Extract tasks with these specific fields:
   - "title": (string) Summary of the task
   - "description": (string) Details, or empty string
   - "priority": (enum) {_PRIORITIES}. Default "Medium".
   - "tag": (enum) {_TAGS}. Default "Feature".

Example Output:
[{{"title": "Fix login", "description": "Login button broken", "priority": "High", "tag": "Bug"}}]
"""

TASK_LIST_SCHEMA: dict[str, object] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "title": {"type": "STRING"},
            "description": {"type": "STRING"},
            "priority": {"type": "STRING", "enum": [p.value for p in Priority]},
            "tag": {"type": "STRING", "enum": [t.value for t in Tag]},
        },
        "required": ["title", "priority", "tag"],
    },
}

__all__ = ["SCHEMA_SYSTEM_PROMPT", "JSON_ONLY_SYSTEM_PROMPT", "TASK_LIST_SCHEMA"]
