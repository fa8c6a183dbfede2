import sys
import uvicorn

def run_http(port: int = 9106):
    """Run HTTP server"""
    print(f"🚀 Starting HTTP server on port {port}...")
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=port,
        reload=False
    )

def run_https(port: int = 9105):
    """Run HTTPS server"""
    print(f"🔒 Starting HTTPS server on port {port}...")
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
        ssl_certfile="cert.pem",
        ssl_keyfile="key.pem"
    )

if __name__ == "__main__":
    if "--https" in sys.argv:
        run_https()
    else:
        run_http()
