"""Message Formatting — builds the generation request text and fixed user-facing strings.

Invariants:
    - build_generation_message is pure: same (prompt, history) -> same text
    - History lines are rendered in append order as "ROLE: text"
    - GENERATION_FAILURE_TEXT is the only text ever used for failed generations

Design Decisions:
    - Full history inlined into one user message on every call: the generation
      service keeps no session, so every request carries full context
"""

GENERATION_FAILURE_TEXT = (
    "I'm sorry, I encountered an error while generating the application. "
    "Please try again or check your API key."
)


def format_history(history: list[dict]) -> str:
    """Render [{role, text}] as "ROLE: text" lines."""
    return "\n".join(
        f"{str(h['role']).upper()}: {h['text']}" for h in history
    )


def build_generation_message(prompt: str, history: list[dict]) -> str:
    """Single user message carrying prior turns plus the new request."""
    rendered = format_history(history) if history else "(no previous messages)"
    return (
        "Current Conversation History:\n"
        f"{rendered}\n\n"
        f"User's New Request: {prompt}\n\n"
        "Based on the history and new request, generate the updated "
        "application code and preview by calling the emit_project tool."
    )
