"""FastAPI routes for the Ordering domain: products, cart, orders, invoices.

Every order and invoice read is filtered by the requester's ``AccessScope``.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from protean.utils.globals import current_domain

from identity.api.dependencies import current_requester
from ordering.api.schemas import (
    AddProductRequest,
    AddToCartRequest,
    CartLineResponse,
    CartResponse,
    CheckoutRequest,
    OrderIdResponse,
    OrderStatusResponse,
    ProductResponse,
    StatusResponse,
    TransitionStatusRequest,
    UpdateCartQuantityRequest,
)
from ordering.cart.items import (
    AddToCart,
    ClearCart,
    RemoveFromCart,
    UpdateCartQuantity,
    cart_for,
)
from ordering.directory import get_directory
from ordering.invoice.issuer import InvoiceIssuer
from ordering.invoice.template import InvoiceHtmlTemplate
from ordering.invoice.view import InvoiceView, build_invoice_view
from ordering.order.checkout import PlaceOrder
from ordering.order.queries import get_order, list_orders
from ordering.order.status import DeleteOrder, TransitionOrderStatus
from ordering.product.management import AddProduct
from ordering.product.product import Product
from shared.access import UNRESTRICTED_ROLES, AccessScope, Requester, require_role


def _role_value(requester: Requester):
    return requester.role.value if requester.role else None


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


def _product_response(product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        name=product.name,
        description=product.description,
        price=product.price,
        stock=product.stock or 0,
        is_active=bool(product.is_active),
    )


@product_router.get("", response_model=list[ProductResponse])
async def list_products() -> list[ProductResponse]:
    products = current_domain.repository_for(Product).query.filter(is_active=True).order_by("name").all().items
    return [_product_response(p) for p in products]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product_response(current_domain.repository_for(Product).get(product_id))


@product_router.post("", status_code=201, response_model=ProductResponse)
async def add_product(body: AddProductRequest, requester: Requester = Depends(current_requester)) -> ProductResponse:
    require_role(requester, UNRESTRICTED_ROLES, "manage products")
    product_id = current_domain.process(
        AddProduct(
            name=body.name,
            description=body.description,
            price=body.price,
            stock=body.stock,
        ),
        asynchronous=False,
    )
    return _product_response(current_domain.repository_for(Product).get(product_id))


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


def _cart_response(customer_id) -> CartResponse:
    cart = cart_for(customer_id)
    if cart is None:
        return CartResponse()

    product_repo = current_domain.repository_for(Product)
    lines = []
    for item in cart.items:
        product = product_repo.get_or_none(item.product_id)
        unit_price = product.price if product else None
        lines.append(
            CartLineResponse(
                product_id=str(item.product_id),
                name=product.name if product else None,
                unit_price=unit_price,
                quantity=item.quantity,
                line_total=round(unit_price * item.quantity, 2) if unit_price is not None else None,
            )
        )
    return CartResponse(
        items=lines,
        item_count=cart.item_count,
        subtotal=round(sum(line.line_total or 0 for line in lines), 2),
    )


@cart_router.get("", response_model=CartResponse)
async def get_cart(requester: Requester = Depends(current_requester)) -> CartResponse:
    return _cart_response(requester.user_id)


@cart_router.post("/items", response_model=CartResponse)
async def add_cart_item(body: AddToCartRequest, requester: Requester = Depends(current_requester)) -> CartResponse:
    command = AddToCart(
        customer_id=requester.user_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return _cart_response(requester.user_id)


@cart_router.put("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str, body: UpdateCartQuantityRequest, requester: Requester = Depends(current_requester)
) -> CartResponse:
    command = UpdateCartQuantity(
        customer_id=requester.user_id,
        product_id=product_id,
        new_quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return _cart_response(requester.user_id)


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(product_id: str, requester: Requester = Depends(current_requester)) -> CartResponse:
    current_domain.process(
        RemoveFromCart(customer_id=requester.user_id, product_id=product_id),
        asynchronous=False,
    )
    return _cart_response(requester.user_id)


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(requester: Requester = Depends(current_requester)) -> CartResponse:
    current_domain.process(ClearCart(customer_id=requester.user_id), asynchronous=False)
    return _cart_response(requester.user_id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def checkout(body: CheckoutRequest, requester: Requester = Depends(current_requester)) -> OrderIdResponse:
    command = PlaceOrder(
        customer_id=requester.user_id,
        payment_method=body.payment_method.value,
        shipping_address=body.shipping_address.model_dump(),
        tax=body.tax,
        shipping=body.shipping,
        notes=body.notes,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


@order_router.get("")
async def get_orders(status: str | None = None, requester: Requester = Depends(current_requester)):
    orders = list_orders(AccessScope.for_requester(requester), status=status)
    return [order.to_summary() for order in orders]


@order_router.get("/{order_id}")
async def get_order_detail(order_id: str, requester: Requester = Depends(current_requester)):
    return get_order(AccessScope.for_requester(requester), order_id).to_summary()


@order_router.put("/{order_id}/status", response_model=OrderStatusResponse)
async def transition_status(
    order_id: str, body: TransitionStatusRequest, requester: Requester = Depends(current_requester)
) -> OrderStatusResponse:
    command = TransitionOrderStatus(
        order_id=order_id,
        status=body.status,
        actor_id=requester.user_id,
        actor_role=_role_value(requester),
    )
    new_status = current_domain.process(command, asynchronous=False)
    return OrderStatusResponse(order_id=order_id, status=new_status)


@order_router.delete("/{order_id}", response_model=StatusResponse)
async def delete_order(order_id: str, requester: Requester = Depends(current_requester)) -> StatusResponse:
    command = DeleteOrder(
        order_id=order_id,
        actor_id=requester.user_id,
        actor_role=_role_value(requester),
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="deleted")


# ---------------------------------------------------------------------------
# Invoice Router
# ---------------------------------------------------------------------------
invoice_router = APIRouter(prefix="/invoices", tags=["invoices"])


def _invoice_view(order_id: str, requester: Requester) -> InvoiceView:
    order = get_order(AccessScope.for_requester(requester), order_id)
    invoice_number = InvoiceIssuer().ensure_invoice_number(order)
    if order.invoice_number != invoice_number:
        # Another request assigned the number first; read the stored order
        order = get_order(AccessScope.for_requester(requester), order_id)
    return build_invoice_view(order, get_directory())


def invoice_response(view: InvoiceView, disposition: str = "inline") -> HTMLResponse:
    """Wrap the rendered invoice for display (``inline``) or download (``attachment``)."""
    headers = {}
    if disposition == "attachment":
        headers["Content-Disposition"] = f'attachment; filename="{view.filename}"'
    return HTMLResponse(content=InvoiceHtmlTemplate.render(view), headers=headers)


@invoice_router.get("/{order_id}")
async def get_invoice(order_id: str, requester: Requester = Depends(current_requester)):
    return _invoice_view(order_id, requester).to_dict()


@invoice_router.get("/{order_id}/html", response_class=HTMLResponse)
async def get_invoice_html(order_id: str, requester: Requester = Depends(current_requester)):
    return invoice_response(_invoice_view(order_id, requester), disposition="inline")


@invoice_router.get("/{order_id}/download", response_class=HTMLResponse)
async def download_invoice(order_id: str, requester: Requester = Depends(current_requester)):
    return invoice_response(_invoice_view(order_id, requester), disposition="attachment")
