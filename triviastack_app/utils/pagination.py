# File: triviastack_app/utils/pagination.py
# Phân trang cho các truy vấn SQLAlchemy.

from flask import current_app


def get_pagination_data(query, page, per_page=None, config_key='DISPUTES_PER_PAGE'):
    """Paginate a query; out-of-range pages come back empty instead of 404."""

    if per_page is None:
        per_page = current_app.config.get(config_key, 20)

    return query.paginate(page=page, per_page=per_page, error_out=False)


def pagination_to_dict(pagination, serialize) -> dict:
    return {
        'items': [serialize(item) for item in pagination.items],
        'total': pagination.total,
        'page': pagination.page,
        'pages': pagination.pages,
        'per_page': pagination.per_page,
    }
