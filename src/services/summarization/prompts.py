"""Prompt text sent to the generative model."""

REQUIRED_SECTIONS: tuple[str, ...] = (
    "Meeting Overview",
    "Key Topics Discussed",
    "Decisions Made",
    "Action Items",
    "Important Highlights",
    "Next Steps",
)

MISSING_INFO_MARKER = "Not mentioned"

MEETING_SUMMARY_PROMPT = f"""Analyze the following meeting recording and produce a clear, structured summary. Output must be in plain text only. Do not use markdown, symbols, bullets, asterisks, or special characters. Use simple line breaks and section headers exactly as listed.

Required Sections:

{REQUIRED_SECTIONS[0]}
Provide a short description of the purpose and context of the meeting.

{REQUIRED_SECTIONS[1]}
List the major topics and themes covered during the discussion in clear, concise sentences.

{REQUIRED_SECTIONS[2]}
State all decisions, conclusions, or agreements reached.

{REQUIRED_SECTIONS[3]}
List all tasks assigned, who is responsible, and any deadlines mentioned.

{REQUIRED_SECTIONS[4]}
Note any crucial insights, issues, concerns, or noteworthy points raised.

{REQUIRED_SECTIONS[5]}
State follow-up actions, plans, or upcoming meetings.

Output Rules:

Plain text only. No markdown, symbols, bullets, or decorations.

Keep each section clear and easy to read.

If information is missing, write "{MISSING_INFO_MARKER}".

Keep wording concise and professional.

Do not add anything that was not in the meeting."""
