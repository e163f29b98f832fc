"""
Invoice Formatter Service

Centralized order text and receipt formatting.
Used by:
- Message order (text sent through the outbound link, plus its preview)
- Point-of-sale receipt (plain text and HTML for display and printing)
"""

from datetime import datetime
from urllib.parse import quote

from enums.message_template import MessageTemplate
from enums.text_entity import TextEntity
from models.cart_line import CartLine
from models.checkout import CustomerDTO, OrderLineDTO
from models.pricing import PricingBreakdownDTO
from models.settings import StoreSettings
from services.pricing import PricingService
from utils.html_escape import safe_html, safe_url
from utils.localizator import Localizator

SEPARATOR = "─" * 30
RECEIPT_WIDTH = 40


class InvoiceFormatterService:
    """Centralized order text and receipt formatting service"""

    @staticmethod
    def build_order_lines(lines: list[CartLine]) -> list[OrderLineDTO]:
        """Snapshot committed cart lines for an order payload."""
        return [
            OrderLineDTO(
                product_id=line.product_id,
                title=line.title,
                quantity=line.quantity,
                unit_price=line.unit_price,
                line_total=line.line_total,
                category=line.category
            )
            for line in lines
        ]

    @staticmethod
    def format_datetime(value: datetime) -> str:
        return value.strftime("%d/%m/%Y, %I:%M %p")

    @staticmethod
    def _bold(text: str) -> str:
        # Message apps render *text* as bold
        return f"*{text}*"

    @staticmethod
    def _group_lines(lines: list[OrderLineDTO], settings: StoreSettings) -> list[tuple[str | None, list[OrderLineDTO]]]:
        """
        Group order lines by category (first-seen order) when enabled.

        Returns:
            [(category or None, lines)]
        """
        if not settings.group_by_category or not any(line.category for line in lines):
            return [(None, lines)]

        other = Localizator.get_text(TextEntity.COMMON, "category_other", lang=settings.language)
        grouped: dict[str, list[OrderLineDTO]] = {}
        for line in lines:
            grouped.setdefault(line.category or other, []).append(line)
        return list(grouped.items())

    @staticmethod
    def _format_tax_line(pricing: PricingBreakdownDTO, settings: StoreSettings) -> str | None:
        if not pricing.includes_tax or pricing.tax <= 0:
            return None
        label = Localizator.get_text(TextEntity.CHECKOUT, "msg_tax", lang=settings.language).format(
            label=settings.pricing.tax_label, percent=pricing.tax_percent
        )
        return f"{label}: {PricingService.format_price(pricing.tax, settings)}"

    @staticmethod
    def format_order_message(
        order_id: str,
        created_at: datetime,
        customer: CustomerDTO,
        lines: list[OrderLineDTO],
        pricing: PricingBreakdownDTO,
        settings: StoreSettings
    ) -> str:
        """
        Format the order text for the configured message template.

        Args:
            order_id: Order id
            created_at: Order timestamp
            customer: Validated customer details
            lines: Order lines
            pricing: Pricing breakdown (tax only present if enabled for messages)
            settings: Store settings

        Returns:
            Plain text with *bold* headers, not yet URL-encoded
        """
        if settings.message_template == MessageTemplate.MINIMAL:
            return InvoiceFormatterService._format_minimal_message(order_id, customer, lines, pricing, settings)
        if settings.message_template == MessageTemplate.DETAILED:
            return InvoiceFormatterService._format_detailed_message(
                order_id, created_at, customer, lines, pricing, settings
            )
        return InvoiceFormatterService._format_default_message(
            order_id, created_at, customer, lines, pricing, settings
        )

    @staticmethod
    def _format_customer_sections(customer: CustomerDTO, settings: StoreSettings) -> list[str]:
        lang = settings.language
        t = lambda key: Localizator.get_text(TextEntity.CHECKOUT, key, lang=lang)
        bold = InvoiceFormatterService._bold

        parts = [bold(t("msg_customer_details"))]
        parts.append(f"{Localizator.get_field_label('name', lang)}: {customer.name}")
        parts.append(f"{Localizator.get_field_label('phone', lang)}: {customer.phone}")
        if customer.email:
            parts.append(f"{Localizator.get_field_label('email', lang)}: {customer.email}")
        parts.append("")

        delivery_label = Localizator.get_text(TextEntity.COMMON, customer.delivery_option.get_label_key(), lang=lang)
        parts.append(bold(t("msg_delivery_details")))
        parts.append(f"{t('msg_type')}: {delivery_label}")
        if customer.address:
            parts.append(f"{Localizator.get_field_label('address', lang)}: {customer.address}")
        parts.append("")

        extra = [(label, value) for label, value in customer.extra_fields.items() if value]
        if extra:
            for label, value in extra:
                parts.append(f"{Localizator.get_field_label(label, lang)}: {value}")
            parts.append("")
        return parts

    @staticmethod
    def _format_default_message(order_id, created_at, customer, lines, pricing, settings) -> str:
        lang = settings.language
        t = lambda key: Localizator.get_text(TextEntity.CHECKOUT, key, lang=lang)
        bold = InvoiceFormatterService._bold
        price = lambda amount: PricingService.format_price(amount, settings)

        parts = [bold(t("msg_new_order")), SEPARATOR, ""]
        parts.extend(InvoiceFormatterService._format_customer_sections(customer, settings))

        parts.extend([SEPARATOR, bold(t("msg_order_items")), SEPARATOR])
        for category, group in InvoiceFormatterService._group_lines(lines, settings):
            if category is not None:
                parts.extend(["", bold(category)])
            for index, line in enumerate(group, start=1):
                parts.append(f"{index}. {line.title} × {line.quantity} = {price(line.line_total)}")

        parts.extend(["", SEPARATOR])
        parts.append(f"{t('msg_subtotal')}: {price(pricing.subtotal)}")
        if pricing.delivery_charge > 0:
            parts.append(f"{t('msg_delivery')}: {price(pricing.delivery_charge)}")
        tax_line = InvoiceFormatterService._format_tax_line(pricing, settings)
        if tax_line:
            parts.append(tax_line)
        parts.append(bold(f"{t('msg_total')}: {price(pricing.total)}"))
        parts.append(SEPARATOR)

        parts.append(f"{t('msg_date')}: {InvoiceFormatterService.format_datetime(created_at)}")
        parts.append(f"{t('msg_order_id')}: {order_id}")
        parts.append(f"{t('msg_website')}: {settings.website}")
        return "\n".join(parts)

    @staticmethod
    def _format_minimal_message(order_id, customer, lines, pricing, settings) -> str:
        t = lambda key: Localizator.get_text(TextEntity.CHECKOUT, key, lang=settings.language)
        bold = InvoiceFormatterService._bold

        parts = [
            f"{bold(t('msg_order_from'))} {customer.name}",
            f"{bold(t('msg_phone'))} {customer.phone}",
            ""
        ]
        for index, line in enumerate(lines, start=1):
            parts.append(f"{index}. {line.title} × {line.quantity}")
        parts.append("")
        parts.append(f"{bold(t('msg_total_short'))} {PricingService.format_price(pricing.total, settings)}")
        parts.append(f"{t('msg_order_id')}: {order_id}")
        return "\n".join(parts)

    @staticmethod
    def _format_detailed_message(order_id, created_at, customer, lines, pricing, settings) -> str:
        t = lambda key: Localizator.get_text(TextEntity.CHECKOUT, key, lang=settings.language)
        bold = InvoiceFormatterService._bold
        price = lambda amount: PricingService.format_price(amount, settings)

        parts = [bold(t("msg_order_number").format(order_id=order_id)), SEPARATOR, ""]
        parts.extend(InvoiceFormatterService._format_customer_sections(customer, settings))

        parts.extend([bold(t("msg_order_items")), SEPARATOR])
        for index, line in enumerate(lines, start=1):
            parts.append(f"{index}. {bold(line.title)}")
            parts.append(f"   {t('msg_price')}: {price(line.unit_price)}")
            parts.append(f"   {t('msg_qty')}: {line.quantity}")
            parts.append(f"   {t('msg_line_subtotal')}: {price(line.line_total)}")
            if index < len(lines):
                parts.append("")
        parts.append(SEPARATOR)

        parts.append(bold(t("msg_payment_summary")))
        parts.append(f"{t('msg_items_total')}: {price(pricing.subtotal)}")
        if pricing.delivery_charge > 0:
            parts.append(f"{t('msg_delivery')}: {price(pricing.delivery_charge)}")
        tax_line = InvoiceFormatterService._format_tax_line(pricing, settings)
        if tax_line:
            parts.append(tax_line)
        parts.append(SEPARATOR)
        parts.append(bold(f"{t('msg_grand_total')}: {price(pricing.total)}"))
        parts.extend([SEPARATOR, ""])

        parts.append(f"{t('msg_order_date')}: {InvoiceFormatterService.format_datetime(created_at)}")
        parts.append(f"{t('msg_website')}: {settings.website}")
        parts.extend(["", t("msg_thank_you")])
        return "\n".join(parts)

    @staticmethod
    def build_message_link(message: str, settings: StoreSettings) -> str:
        """
        Build the outbound message link.

        Example:
            https://wa.me/919134567890?text=%2ANEW%20ORDER%2A%0A...
        """
        url = f"https://wa.me/{settings.message_phone_number}?text={quote(message, safe='')}"
        return safe_url(url)

    @staticmethod
    def format_receipt_text(
        order_id: str,
        created_at: datetime,
        lines: list[OrderLineDTO],
        pricing: PricingBreakdownDTO,
        settings: StoreSettings
    ) -> str:
        """
        Format the point-of-sale receipt as fixed-width text.

        Example output:
                          ShopHub
                    +91 9134567890
                   support@shop.com
                      TAX INVOICE
            Date: 18/10/2026, 10:30 AM
            Order #: ORD1760783400000
            ----------------------------------------
            Green Tea                        ₹1200.00
              2 × ₹600.00
            ----------------------------------------
            Subtotal:                        ₹1200.00
            Delivery Charge:                    ₹0.00
            Tax (18% GST):                    ₹216.00
            TOTAL:                           ₹1416.00
        """
        t = lambda key: Localizator.get_text(TextEntity.CHECKOUT, key, lang=settings.language)
        price = lambda amount: PricingService.format_price(amount, settings)
        row = lambda left, right: f"{left}{right:>{max(RECEIPT_WIDTH - len(left), len(right) + 1)}}"
        rule = "-" * RECEIPT_WIDTH

        parts = [
            settings.business_name.center(RECEIPT_WIDTH).rstrip(),
            f"+{settings.country_code} {settings.business_phone}".center(RECEIPT_WIDTH).rstrip(),
            settings.business_email.center(RECEIPT_WIDTH).rstrip(),
            t("receipt_tax_invoice").center(RECEIPT_WIDTH).rstrip(),
            f"{t('receipt_date')}: {InvoiceFormatterService.format_datetime(created_at)}",
            f"{t('receipt_order_number')}: {order_id}",
            rule
        ]

        for category, group in InvoiceFormatterService._group_lines(lines, settings):
            if category is not None:
                parts.append(f"[{category}]")
            for line in group:
                parts.append(row(line.title, price(line.line_total)))
                parts.append(f"  {line.quantity} × {price(line.unit_price)}")

        tax_label = t("receipt_tax").format(percent=pricing.tax_percent, label=settings.pricing.tax_label)
        parts.extend([
            rule,
            row(t("receipt_subtotal"), price(pricing.subtotal)),
            row(t("receipt_delivery"), price(pricing.delivery_charge)),
            row(tax_label, price(pricing.tax)),
            row(t("receipt_total"), price(pricing.total)),
            rule,
            t("receipt_thanks").center(RECEIPT_WIDTH).rstrip(),
            t("receipt_visit").format(website=settings.website).center(RECEIPT_WIDTH).rstrip(),
            t("receipt_generated").center(RECEIPT_WIDTH).rstrip()
        ])
        return "\n".join(parts)

    @staticmethod
    def format_receipt_html(
        order_id: str,
        created_at: datetime,
        lines: list[OrderLineDTO],
        pricing: PricingBreakdownDTO,
        settings: StoreSettings
    ) -> str:
        """
        Format the point-of-sale receipt as HTML for the host's receipt view and print surface.

        Catalog titles, categories and business details are escaped.
        """
        t = lambda key: Localizator.get_text(TextEntity.CHECKOUT, key, lang=settings.language)
        price = lambda amount: safe_html(PricingService.format_price(amount, settings))

        html = '<div class="pos-header">\n'
        html += f'<h2>{safe_html(settings.business_name)}</h2>\n'
        html += f'<p>+{safe_html(settings.country_code)} {safe_html(settings.business_phone)}</p>\n'
        html += f'<p>{safe_html(settings.business_email)}</p>\n'
        html += f'<p class="pos-invoice">{t("receipt_tax_invoice")}</p>\n'
        html += f'<p>{t("receipt_date")}: {InvoiceFormatterService.format_datetime(created_at)}</p>\n'
        html += f'<p>{t("receipt_order_number")}: {safe_html(order_id)}</p>\n'
        html += '</div>\n<div class="pos-items">\n'

        for category, group in InvoiceFormatterService._group_lines(lines, settings):
            if category is not None:
                html += f'<div class="pos-category">{safe_html(category)}</div>\n'
            for line in group:
                html += (
                    '<div class="pos-item">'
                    f'<div class="pos-item-name">{safe_html(line.title)}</div>'
                    f'<div class="pos-item-qty">{line.quantity} × {price(line.unit_price)}</div>'
                    f'<div class="pos-item-price">{price(line.line_total)}</div>'
                    '</div>\n'
                )

        tax_label = t("receipt_tax").format(percent=pricing.tax_percent, label=safe_html(settings.pricing.tax_label))
        totals = [
            ("pos-total-row", t("receipt_subtotal"), price(pricing.subtotal)),
            ("pos-total-row", t("receipt_delivery"), price(pricing.delivery_charge)),
            ("pos-total-row", tax_label, price(pricing.tax)),
            ("pos-total-row grand-total", t("receipt_total"), price(pricing.total)),
        ]
        html += '</div>\n<div class="pos-totals">\n'
        for css_class, label, amount in totals:
            html += f'<div class="{css_class}"><span>{label}</span><span>{amount}</span></div>\n'
        html += '</div>\n<div class="pos-footer">\n'
        html += f'<p>{t("receipt_thanks")}</p>\n'
        html += f'<p>{t("receipt_visit").format(website=safe_html(settings.website))}</p>\n'
        html += f'<p class="pos-generated">{t("receipt_generated")}</p>\n'
        html += '</div>'
        return html
