"""
Resume Tailor - CLI Entry Point.

    python main.py serve                 run the API
    python main.py <resume.pdf|docx>     tailor a resume interactively
"""

import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from resume_tailor.agents import AnalysisError  # noqa: E402
from resume_tailor.logging_config import configure_logging  # noqa: E402
from resume_tailor.services import tailoring  # noqa: E402
from resume_tailor.storage import MemStorage  # noqa: E402
from resume_tailor.tools.file_parser import FileProcessingError, process_resume_file  # noqa: E402
from resume_tailor.tools.job_scraper import ScrapeError  # noqa: E402


def serve():
    import uvicorn

    uvicorn.run("resume_tailor.api.app:app", host="0.0.0.0", port=8000)


def read_job() -> tuple[str | None, str | None]:
    """Ask for a job URL, or a pasted description ended by an empty line."""
    answer = input("Job URL (or press Enter to paste a description): ").strip()
    if answer:
        return answer, None

    print("Paste the job description, then an empty line:")
    lines = []
    while True:
        line = input()
        if not line.strip():
            break
        lines.append(line)
    return None, "\n".join(lines)


def tailor(resume_path: Path):
    """Run one tailoring session against an in-memory store."""
    print("Resume Tailor")
    print("=" * 40)

    try:
        processed = process_resume_file(resume_path.name, resume_path.read_bytes())
    except FileProcessingError as e:
        print(f"Error: {e}")
        return
    print(f"Loaded {processed.filename} ({len(processed.text)} chars)")

    storage = MemStorage()
    session = tailoring.create_tailoring_session(storage)
    tailoring.upload_resume_to_session(storage, session.id, processed)

    job_url, job_description = read_job()
    if not job_url and not job_description:
        print("No job given")
        return

    try:
        print("\nAnalyzing job...")
        tailoring.analyze_job_for_session(storage, session.id, job_url=job_url, job_description=job_description)
        print("Tailoring resume...")
        result = tailoring.tailor_resume_for_session(storage, session.id)
    except (AnalysisError, ScrapeError) as e:
        print(f"Error: {e}")
        return

    content = result.tailored_content
    print(f"\nMatch score: {result.match_score}")
    print(f"ATS score:   {content.ats_score}")
    if result.resume_analysis.missing_keywords:
        print(f"Missing:     {', '.join(result.resume_analysis.missing_keywords)}")
    for improvement in content.improvements:
        print(f"  - {improvement}")

    fmt = input("\nSave as pdf/docx (Enter to skip): ").strip().lower()
    if fmt in ("pdf", "docx"):
        data, filename = tailoring.render_session_document(storage, session.id, fmt)
        Path(filename).write_bytes(data)
        print(f"Saved {filename}")


def main():
    """Run the resume tailor CLI."""
    configure_logging()

    if len(sys.argv) < 2:
        print(__doc__)
        return

    if sys.argv[1] == "serve":
        serve()
        return

    resume_path = Path(" ".join(sys.argv[1:]))  # Join all args for filenames with spaces
    if not resume_path.exists():
        print(f"Not found: {resume_path}")
        return

    try:
        tailor(resume_path)
    except KeyboardInterrupt:
        pass
    print("Goodbye!")


if __name__ == "__main__":
    main()
