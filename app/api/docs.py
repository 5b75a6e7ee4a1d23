"""
app/api/docs.py

Purpose: Service index and JSON API documentation

- GET /: service name, version, endpoint summary
- GET /api-docs: endpoint reference with request/response examples
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_base_url

router = APIRouter()

API_VERSION = "1.0.0"


@router.get("/")
async def root(base_url: str = Depends(get_base_url)):
    """Root endpoint - basic info."""
    return {
        "success": True,
        "message": "SMS Deep Link API",
        "version": API_VERSION,
        "endpoints": {
            "docs": "GET /api-docs - Complete API documentation",
            "generate": "POST /api/sms/generate - Generate SMS deep link",
            "redirect": "GET /s/{shortId} - Redirect to SMS app",
            "analytics": "GET /api/sms/analytics/{shortId} - Get link analytics",
            "health": "GET /health - System health check"
        },
        "documentation": f"{base_url}/api-docs"
    }


@router.get("/api-docs")
async def api_documentation(base_url: str = Depends(get_base_url)):
    """Endpoint reference with examples, rendered for the current host."""
    return {
        "success": True,
        "title": "SMS Deep Link API Documentation",
        "version": API_VERSION,
        "description": "Generate SMS deep links with analytics tracking",
        "baseUrl": base_url,
        "endpoints": {
            "documentation": {
                "method": "GET",
                "path": "/api-docs",
                "description": "API documentation (this endpoint)"
            },
            "health": {
                "method": "GET",
                "path": "/health",
                "description": "Health check and system status"
            },
            "generateSmsLink": {
                "method": "POST",
                "path": "/api/sms/generate",
                "description": "Generate a new SMS deep link with short URL",
                "requestBody": {
                    "phone": "string (required) - Phone number, at least 10 digits",
                    "message": "string (required) - SMS message text"
                },
                "example": {
                    "request": {
                        "phone": "+1234567890",
                        "message": "Hello! Check out this link."
                    },
                    "response": {
                        "success": True,
                        "data": {
                            "shortUrl": f"{base_url}/s/abc123",
                            "deepLink": "sms:+1234567890?body=Hello!%20Check%20out%20this%20link.",
                            "shortId": "abc123",
                            "recipient": "+1234567890",
                            "message": "Hello! Check out this link."
                        }
                    }
                }
            },
            "redirectShortLink": {
                "method": "GET",
                "path": "/s/{shortId}",
                "description": "Redirect to SMS deep link and track clicks",
                "example": f"{base_url}/s/abc123"
            },
            "getAnalytics": {
                "method": "GET",
                "path": "/api/sms/analytics/{shortId}",
                "description": "Get analytics data for a specific short link",
                "example": {
                    "url": f"{base_url}/api/sms/analytics/abc123",
                    "response": {
                        "success": True,
                        "data": {
                            "shortId": "abc123",
                            "recipient": "+1234567890",
                            "message": "Hello! Check out this link.",
                            "clickCount": 5,
                            "createdAt": "2024-01-01T00:00:00.000Z",
                            "lastClickedAt": "2024-01-01T12:00:00.000Z"
                        }
                    }
                }
            }
        },
        "usage": {
            "curl": {
                "generateLink": (
                    f"curl -X POST {base_url}/api/sms/generate -H \"Content-Type: application/json\" "
                    "-d '{\"phone\": \"+1234567890\", \"message\": \"Hello World!\"}'"
                ),
                "getAnalytics": f"curl {base_url}/api/sms/analytics/abc123",
                "healthCheck": f"curl {base_url}/health"
            }
        }
    }
