def handler(request):
    return {"error": "not found", "path": request.path}
