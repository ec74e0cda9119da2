"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Build prompts from the user's date context.
- Call Groq LLM to plan a three-step date course with place search keywords.
- Graceful fallback when the LLM is unavailable or returns invalid output.
"""
