#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Usage: python run.py  (from the backend/ directory)
"""
import uvicorn

if __name__ == "__main__":
    print("Starting CoachConnect API at http://localhost:8000 (docs at /docs)")
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
