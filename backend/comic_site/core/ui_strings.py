"""UI Strings — locale-specific string tables bound into every view as `lang`.

Invariants:
    - All strings are pure data (no IO)
    - Every table has exactly the keys of the default table
    - get_ui_strings() returns a fresh copy; callers may mutate it freely

Design Decisions:
    - Absent locale falls back to the English table
    - Tables are plain dicts keyed by Locale; the controller receives the lookup
      function at construction instead of reaching for a global
"""

from typing import Callable

from comic_site.core.domain_types import Locale

StringTable = Callable[[Locale | None], dict[str, str]]


_DEFAULT_STRINGS: dict[str, str] = {
    "site_name": "Comic Site",
    "home": "Home",
    "comic_list": "Comics",
    "add_comic": "New comic",
    "edit_comic": "Edit comic",
    "add_page": "New page",
    "edit_page": "Edit page",
    "title": "Title",
    "author": "Author",
    "poster": "Posted by",
    "description": "Description",
    "content": "Content",
    "image_url": "Image URL",
    "image_file": "Image file",
    "submit": "Submit",
    "previous_page": "Previous",
    "next_page": "Next",
    "last_page": "Latest page",
    "quick_jump": "Jump to page",
    "page_count": "Pages",
    "newest_pages": "Newest pages",
    "all_pages": "All pages",
    "no_comics": "No comics yet.",
    "not_found": "Not found",
    "error": "Error",
}

_LOCALE_STRINGS: dict[Locale, dict[str, str]] = {
    Locale.ZH_CN: {
        "site_name": "漫画站",
        "home": "首页",
        "comic_list": "漫画列表",
        "add_comic": "新建漫画",
        "edit_comic": "编辑漫画",
        "add_page": "新建页面",
        "edit_page": "编辑页面",
        "title": "标题",
        "author": "作者",
        "poster": "发布者",
        "description": "简介",
        "content": "内容",
        "image_url": "图片网址",
        "image_file": "图片文件",
        "submit": "提交",
        "previous_page": "上一页",
        "next_page": "下一页",
        "last_page": "最新一页",
        "quick_jump": "跳转到",
        "page_count": "页数",
        "newest_pages": "最新页面",
        "all_pages": "全部页面",
        "no_comics": "暂无漫画。",
        "not_found": "找不到页面",
        "error": "错误",
    },
    Locale.ZH_TW: {
        "site_name": "漫畫站",
        "home": "首頁",
        "comic_list": "漫畫列表",
        "add_comic": "新建漫畫",
        "edit_comic": "編輯漫畫",
        "add_page": "新建頁面",
        "edit_page": "編輯頁面",
        "title": "標題",
        "author": "作者",
        "poster": "發佈者",
        "description": "簡介",
        "content": "內容",
        "image_url": "圖片網址",
        "image_file": "圖片檔案",
        "submit": "送出",
        "previous_page": "上一頁",
        "next_page": "下一頁",
        "last_page": "最新一頁",
        "quick_jump": "跳轉到",
        "page_count": "頁數",
        "newest_pages": "最新頁面",
        "all_pages": "全部頁面",
        "no_comics": "暫無漫畫。",
        "not_found": "找不到頁面",
        "error": "錯誤",
    },
}


def get_ui_strings(locale: Locale | None) -> dict[str, str]:
    """Return the UI string table for locale (English when locale is None)."""
    if locale is None:
        return dict(_DEFAULT_STRINGS)
    return dict(_LOCALE_STRINGS.get(locale, _DEFAULT_STRINGS))
