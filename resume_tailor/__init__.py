"""
Resume Tailor Backend.

Core components:
- storage: Repository layer with in-memory and database backends
- agents: LLM-backed analysis (contact info, job analysis, match, tailoring)
- services: Tailoring workflow, follow-ups, interview prep, insights
- tools: File text extraction, job scraping, document rendering
- api: FastAPI routes and auth guards
"""
