"""JSON responses with the permissive CORS header set."""

from starlette.responses import JSONResponse, Response


class JsonResponse(JSONResponse):
    media_type = "application/json; charset=utf-8"


def cors_headers() -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET,OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
        "Vary": "Origin",
    }


def with_cors(response: Response) -> Response:
    for k, v in cors_headers().items():
        response.headers[k] = v
    return response


def json_response(content, status_code: int = 200) -> Response:
    return with_cors(JsonResponse(content=content, status_code=status_code))
