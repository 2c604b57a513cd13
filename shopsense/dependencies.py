from fastapi import Request

from shopsense.services.container import ShopServices


def get_services(request: Request) -> ShopServices:
    return request.app.state.services
