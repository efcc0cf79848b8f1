"""Instruction prompts shared by the provider backends."""

TRANSCRIPTION_PROMPT = (
    "Transcribe this audio recording verbatim. "
    "Add punctuation and capitalization. "
    "Return only the transcription text."
)

FORMATTING_PROMPT = """You are an editor turning dictated speech into clean written notes. The text you receive comes from speech-to-text software.

- Remove filler words, false starts and repetitions
- Keep every fact, name, number and technical term exactly as spoken
- Do not add information or change the meaning
- Organize the content into short paragraphs or bullet points where it helps readability
- If the speaker mentions tasks or follow-ups, list them at the end under "Action items"

Return only the formatted text without commentary."""
