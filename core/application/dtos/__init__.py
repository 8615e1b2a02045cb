"""Application DTOs."""

from .common import CamelModel, MoneyValue
from .order_dto import (
    AddressDTO,
    CreateOrderRequest,
    CustomerInfoDTO,
    CustomerInfoInput,
    OrderDTO,
    OrderEventDTO,
    OrderItemDTO,
    OrderLineRequest,
    OrderListDTO,
    RefundDTO,
    RefundOrderRequest,
    UpdateOrderStatusRequest,
)
from .payment_dto import (
    CapturePayPalRequest,
    ConfirmStripePaymentRequest,
    PaymentResultDTO,
    PayPalCheckoutResponse,
    StripeCheckoutResponse,
)
from .return_dto import (
    CreateReturnRequest,
    ReturnDTO,
    ReturnItemDTO,
    ReturnLineRequest,
    UpdateReturnRequest,
)
from .settings_dto import StoreSettingsDTO, UpdateStoreSettingsRequest

__all__ = [
    "AddressDTO",
    "CamelModel",
    "CapturePayPalRequest",
    "ConfirmStripePaymentRequest",
    "CreateOrderRequest",
    "CreateReturnRequest",
    "CustomerInfoDTO",
    "CustomerInfoInput",
    "MoneyValue",
    "OrderDTO",
    "OrderEventDTO",
    "OrderItemDTO",
    "OrderLineRequest",
    "OrderListDTO",
    "PaymentResultDTO",
    "PayPalCheckoutResponse",
    "RefundDTO",
    "RefundOrderRequest",
    "ReturnDTO",
    "ReturnItemDTO",
    "ReturnLineRequest",
    "StoreSettingsDTO",
    "StripeCheckoutResponse",
    "UpdateOrderStatusRequest",
    "UpdateReturnRequest",
]
