import time


async def handler(request, next):
    start = time.perf_counter()
    response = await next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    return response.with_header("X-Response-Time", f"{elapsed_ms:.2f}ms")
