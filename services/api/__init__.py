"""
Backend API Service - FastAPI Application

Responsibilities:
- Expose the top-up pipeline to the browser client
- Accept users and companies collections as one JSON payload
- Return the company groups plus the rendered report text
- CORS for the frontend dev servers

Endpoints:
- GET /api/health - Health check
- POST /api/process - Run the pipeline over {"users": [...], "companies": [...]}

Usage:
    python -m services.api
    uvicorn services.api.app:app --port 4567
"""
