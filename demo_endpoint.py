"""
Quick demo script to run the PG Community backend locally.

Starts a reloading development server and prints the main technician
endpoints with an example request.
"""

import uvicorn

from backend.config import settings

if __name__ == "__main__":
    base = f"http://localhost:{settings.PORT}"

    print("=" * 60)
    print("Starting PG Community Backend Demo")
    print("=" * 60)
    print()
    print("📌 API Endpoints:")
    print(f"   - Health Check:        GET    {base}/health")
    print(f"   - Current identity:    GET    {base}/api/auth/me")
    print(f"   - Create technician:   POST   {base}/api/technician")
    print(f"   - PG technicians:      GET    {base}/api/technician/pg/<pgCommunityId>")
    print(f"   - Owner technicians:   GET    {base}/api/technician/owner/all")
    print(f"   - API Docs:                   {base}/docs")
    print()
    print("🔐 Authentication:")
    print("   All endpoints (except /health and /api/auth/logout) require the cookie:")
    print(f"   {settings.AUTH_COOKIE_NAME}=<jwt with userId and role>")
    print()
    print("📝 Test with curl:")
    print(f'   curl "{base}/api/technician/owner/all" \\')
    print(f'     --cookie "{settings.AUTH_COOKIE_NAME}=<token>"')
    print()
    print("=" * 60)
    print(f"Starting server on {base}")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.is_development(),
        log_level=settings.LOG_LEVEL.lower(),
    )
