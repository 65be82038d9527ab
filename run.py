#!/usr/bin/env python3
"""
Run script for the Cloud Auth API.
This script launches the FastAPI server exposing the same routes as the
serverless function. JWT_SECRET must be set; STORE_BACKEND=sql uses a
local SQLite file instead of DynamoDB.
"""
import uvicorn
import sys
import traceback

if __name__ == "__main__":
    try:
        print("Starting Cloud Auth API server...")
        print("Access the API at http://localhost:8000")

        uvicorn.run(
            "cloud_auth.main:app",
            host="0.0.0.0",
            port=8000,
            reload=True,
            log_level="info"
        )
    except Exception as e:
        print(f"Error starting server: {e}")
        traceback.print_exc()
        sys.exit(1)
