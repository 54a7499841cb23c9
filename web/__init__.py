"""HTTP layer for AuthGate (FastAPI)"""
