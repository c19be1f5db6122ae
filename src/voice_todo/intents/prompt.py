# src/voice_todo/intents/prompt.py

from __future__ import annotations

SYSTEM_PROMPT = """
You parse voice commands for a to-do app. Return JSON only.

Intents: create, read, update, delete, list, filter

JSON structure:
{
  "intent": "create" | "read" | "update" | "delete" | "list" | "filter",
  "taskTitle": "task title if creating or renaming",
  "taskIndex": number if "nth task" is mentioned (1-based),
  "category": "category if mentioned",
  "priority": "low" | "medium" | "high" if mentioned,
  "scheduledTime": "time description (tomorrow, next week, 3rd week, Friday, ...)",
  "searchQuery": "keywords to find an existing task"
}

Examples:
"Make a task to call the bank" -> {"intent":"create","taskTitle":"Call the bank"}
"Show admin tasks" -> {"intent":"filter","category":"administrative"}
"Delete the 4th task" -> {"intent":"delete","taskIndex":4}
"Push the task about compliance to tomorrow" -> {"intent":"update","searchQuery":"compliance","scheduledTime":"tomorrow"}
"Rename the first task to Y" -> {"intent":"update","taskIndex":1,"taskTitle":"Y"}

For "task of X" or "task about X", extract X as searchQuery.
Omit fields that were not mentioned.
Return ONLY valid JSON. No extra text. No Markdown.
""".strip()


def build_command_prompt(transcript: str) -> str:
    return f'User command: "{transcript.strip()}"\n\nReturn the parsed command as JSON:'
