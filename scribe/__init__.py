"""
SCRIBE - Structured Cover-letter Rendering via an Inference-Backed Engine

Turns a structured job record into a finished cover letter using a locally
hosted text-generation service (Ollama-compatible).

Architecture:
- Intake Context: Job records, applicant context, document reading
- Prompting Context: Prompt template and bounded prompt assembly
- Inference Context: Backend lifecycle, generation requests, retries
- Rendering Context: Output normalization, naming, and .txt/.docx/.pdf persistence
"""

__version__ = "0.1.0"
