"""Default cover letter prompt template and its fixed fragments."""

NOT_PROVIDED = "(Not provided)"

CUE_LINE = "Cover letter:"

SAMPLE_SECTION_HEADER = (
    "Use the following cover letter as an example to base your tone, format and content off:"
)

DEFAULT_PROMPT_TEMPLATE = """You are a professional cover letter writer. Write a concise, tailored cover letter for the following job application. Use a formal but warm tone. Do not invent qualifications; align the letter with the candidate's background when provided.

Company: {{ company }}
Role: {{ position_name }}
Location: {{ location }}
Job type: {{ job_type }}

Job description:
---
{{ description }}
---

Applicant context (use only if provided):
{{ applicant_name }}
{{ resume_snippet }}

{{ cover_letter_section }}

Instructions:
- Address the letter to the hiring team or "Hiring Manager" if no name is given.
- Open with a short paragraph stating the role and company you are applying to.
- In one or two paragraphs, connect your experience and motivation to the role and company (use resume/context above if provided).
- Close with a brief sign-off (e.g. "Yours sincerely") followed by a placeholder for the applicant's name: [Your full name] or the applicant name if provided.
- Keep the letter to one page when possible (roughly 250-400 words).
- Output only the cover letter text, no meta-commentary or markdown.

Cover letter:
"""
