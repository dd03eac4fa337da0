def handler(request, exc):
    return {"error": type(exc).__name__, "detail": str(exc)}
