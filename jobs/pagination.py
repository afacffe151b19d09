# jobs/pagination.py
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import quote

from .utils import parse_leading_int

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 12
MAX_LIMIT = 100

# Visible page links in the pagination bar
MAX_VISIBLE_PAGES = 7

SEARCH_PARAM_KEYS = ('search', 'capability', 'location', 'band', 'status')

# left unescaped in query values
_URI_COMPONENT_SAFE = "!*'()"


@dataclass
class PaginationResult:
    is_valid: bool
    page: int
    limit: int
    error: Optional[str] = None


@dataclass
class PaginationMeta:
    current_page: int
    total_pages: int
    total_count: int
    limit: int
    has_next: bool
    has_previous: bool

    @classmethod
    def from_backend(cls, data):
        return cls(
            current_page=int(data.get('currentPage', DEFAULT_PAGE)),
            total_pages=int(data.get('totalPages', 0)),
            total_count=int(data.get('totalCount', 0)),
            limit=int(data.get('limit', DEFAULT_LIMIT)),
            has_next=bool(data.get('hasNext', False)),
            has_previous=bool(data.get('hasPrevious', False)),
        )

    @classmethod
    def empty(cls, page=DEFAULT_PAGE, limit=DEFAULT_LIMIT):
        return cls(current_page=page, total_pages=0, total_count=0, limit=limit,
                   has_next=False, has_previous=False)

    @classmethod
    def for_count(cls, total_count, page, limit):
        total_pages = (total_count + limit - 1) // limit if limit else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_count=total_count,
            limit=limit,
            has_next=page < total_pages,
            has_previous=page > 1,
        )


@dataclass
class PaginatedResult:
    data: list = field(default_factory=list)
    pagination: PaginationMeta = field(default_factory=PaginationMeta.empty)


def _parse_positive_int(raw):
    """
    Parse the leading integer of a trimmed query value.
    Returns None for anything that is not a whole number >= 1.
    """
    text = raw.strip()
    if '.' in text:
        return None
    value = parse_leading_int(text)
    if value is None or value < 1:
        return None
    return value


def validate_pagination_params(page_str=None, limit_str=None):
    """
    Validate raw ``page`` / ``limit`` query values.

    Missing or blank values take the defaults. The page is checked first and
    a bad page stops validation, so at most one error is reported. On any
    error the returned page/limit still hold safe defaults. Never raises.
    """
    page = DEFAULT_PAGE
    if page_str is not None and page_str.strip():
        parsed_page = _parse_positive_int(page_str)
        if parsed_page is None:
            return PaginationResult(
                is_valid=False,
                page=DEFAULT_PAGE,
                limit=DEFAULT_LIMIT,
                error='Page must be a positive integer',
            )
        page = parsed_page

    limit = DEFAULT_LIMIT
    if limit_str is not None and limit_str.strip():
        parsed_limit = _parse_positive_int(limit_str)
        if parsed_limit is None:
            return PaginationResult(
                is_valid=False,
                page=page,
                limit=DEFAULT_LIMIT,
                error='Limit must be a positive integer',
            )
        if parsed_limit > MAX_LIMIT:
            return PaginationResult(
                is_valid=False,
                page=page,
                limit=DEFAULT_LIMIT,
                error=f'Limit cannot exceed {MAX_LIMIT}',
            )
        limit = parsed_limit

    return PaginationResult(is_valid=True, page=page, limit=limit)


# -------------------------
# Pagination URLs
# -------------------------
def build_search_query_string(search_params):
    """
    Encode the non-empty search/filter values as ``&key=value`` pairs.
    Returns an empty string when nothing is set.
    """
    if not search_params:
        return ''
    parts = []
    for key in SEARCH_PARAM_KEYS:
        value = (search_params.get(key) or '').strip()
        if value:
            parts.append(f'{key}={quote(value, safe=_URI_COMPONENT_SAFE)}')
    return '&' + '&'.join(parts) if parts else ''


def build_pagination_url(base_url, page, limit, search_params=None):
    return f"{base_url}?page={page}&limit={limit}{build_search_query_string(search_params)}"


def build_pagination_urls(base_url, current_page, total_pages, limit, search_params=None):
    """
    URLs for the pagination bar: first/previous/next/last plus a window of
    at most seven page links around the current page.
    """
    urls = {
        'first': build_pagination_url(base_url, 1, limit, search_params),
        'previous': build_pagination_url(base_url, current_page - 1, limit, search_params) if current_page > 1 else None,
        'next': build_pagination_url(base_url, current_page + 1, limit, search_params) if current_page < total_pages else None,
        'last': build_pagination_url(base_url, total_pages, limit, search_params),
        'pages': [],
    }

    start_page, end_page = 1, total_pages
    if total_pages > MAX_VISIBLE_PAGES:
        if current_page <= 4:
            end_page = 5
        elif current_page >= total_pages - 3:
            start_page = total_pages - 4
        else:
            start_page = current_page - 2
            end_page = current_page + 2

    for page in range(start_page, end_page + 1):
        urls['pages'].append({
            'page': page,
            'url': build_pagination_url(base_url, page, limit, search_params),
            'is_current': page == current_page,
        })
    return urls


def paginate_list(items: List, page: int, limit: int) -> PaginatedResult:
    """Slice an in-memory list into one page."""
    start = (page - 1) * limit
    return PaginatedResult(
        data=list(items[start:start + limit]),
        pagination=PaginationMeta.for_count(len(items), page, limit),
    )
