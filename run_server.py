#!/usr/bin/env python3
"""
Simple script to run the server
Just run: python3 run_server.py
"""
import sys
import os

# Add project root to Python path
project_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, project_root)

if __name__ == "__main__":
    import uvicorn
    from exam_platform.core.config import HOST, PORT, LOG_LEVEL
    from exam_platform.main import app

    print("=" * 50)
    print("Starting Exam Ledger Server...")
    print("=" * 50)
    print(f"Server will be available at: http://localhost:{PORT}")
    print(f"API docs available at: http://localhost:{PORT}/docs")
    print("=" * 50)
    print("Press CTRL+C to stop the server")
    print("=" * 50)

    # Run the server
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())
