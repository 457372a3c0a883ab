"""Browser UI for managing products.

Pages read and write through the product API, never the database directly.
"""
from flask import current_app, flash, redirect, render_template, request, url_for

from product_manager.blueprints.dashboard import dashboard_bp
from product_manager.services import api_client, listing
from product_manager.services.api_client import ApiError
from product_manager.services.product_service import FIELDS

RECENT_COUNT = 2


def _fetch_products(client):
    try:
        return client.list_products()
    except ApiError as e:
        flash(e.message, "error")
        return []


def _submitted_fields():
    return {name: request.form.get(name, "") for name in FIELDS}


@dashboard_bp.route("/")
def dashboard():
    """Summary counts and the most recent products."""
    with api_client.get_api_client() as client:
        products = _fetch_products(client)

    active = sum(1 for p in products if p.get("status") == "active")
    stats = {
        "total": len(products),
        "active": active,
        "inactive": len(products) - active,
    }
    recent = sorted(products, key=lambda p: p.get("createdAt") or "", reverse=True)
    return render_template(
        "dashboard.html", stats=stats, recent=recent[:RECENT_COUNT]
    )


@dashboard_bp.route("/products")
def product_list():
    """Product grid with status/date filters and pagination."""
    flt = listing.ListingFilter.from_args(request.args)
    page_num = request.args.get("page", 1, type=int)
    per_page = current_app.config["PRODUCTS_PER_PAGE"]

    with api_client.get_api_client() as client:
        products = _fetch_products(client)

    filtered = listing.filter_products(products, flt)
    page = listing.paginate(filtered, page=page_num, per_page=per_page)

    return render_template(
        "products/list.html",
        page=page,
        filters=flt,
        filtered_count=len(filtered),
        total_count=len(products),
        statuses=("active", "inactive"),
    )


@dashboard_bp.route("/products/new", methods=["GET", "POST"])
def product_create():
    product = {"status": "active"}
    if request.method == "POST":
        product = _submitted_fields()
        try:
            with api_client.get_api_client() as client:
                client.create_product(product, request.files.get("image"))
        except ApiError as e:
            flash(e.message, "error")
        else:
            flash("Product created successfully!", "success")
            return redirect(url_for("dashboard.product_list"))

    return render_template("products/form.html", product=product, is_new=True)


@dashboard_bp.route("/products/<product_id>/edit", methods=["GET", "POST"])
def product_edit(product_id):
    """Edit form; the product is always re-fetched by id."""
    product = None
    try:
        with api_client.get_api_client() as client:
            product = client.get_product(product_id)
            if request.method == "POST":
                client.update_product(
                    product_id, _submitted_fields(), request.files.get("image")
                )
                flash("Product updated successfully!", "success")
                return redirect(url_for("dashboard.product_list"))
    except ApiError as e:
        flash(e.message, "error")
        if product is None:
            return redirect(url_for("dashboard.product_list"))
        # Keep what the user typed so they can correct it.
        product = {**product, **_submitted_fields()}

    return render_template("products/form.html", product=product, is_new=False)


@dashboard_bp.route("/products/<product_id>/delete", methods=["GET", "POST"])
def product_delete(product_id):
    """Confirmation step, then the delete itself."""
    try:
        with api_client.get_api_client() as client:
            if request.method == "POST":
                client.delete_product(product_id)
                flash("Product Deleted Successfully", "success")
                return redirect(url_for("dashboard.product_list"))
            product = client.get_product(product_id)
    except ApiError as e:
        flash(e.message, "error")
        return redirect(url_for("dashboard.product_list"))

    return render_template("products/confirm_delete.html", product=product)
