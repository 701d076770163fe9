"""
backend — FastAPI application package.

Routers: api/auth.py, api/predict.py, api/progress.py, api/health.py
Schemas: schemas/requests.py, schemas/response.py
Services: services/ (auth, classification, storage, progress)
Entry point: main.py → run with `uvicorn backend.main:app --reload`
"""
