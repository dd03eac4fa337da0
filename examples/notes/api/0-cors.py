async def handler(request, next):
    response = await next(request)
    return response.with_header("Access-Control-Allow-Origin", "*")
