from typing import Optional

from fastapi import Depends, Query

from config import Settings, get_app_settings


class Paging:
    def __init__(self, page: int, page_size: int):
        self.page = page
        self.page_size = page_size


def get_paging(
        page: int = Query(1, ge=1),
        page_size: Optional[int] = Query(None, ge=1, alias="pageSize"),
        settings: Settings = Depends(get_app_settings),
) -> Paging:
    size = page_size or settings.default_page_size
    return Paging(page=page, page_size=min(size, settings.max_page_size))
