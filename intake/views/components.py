from __future__ import annotations

import html

from services.messages import StatusMessage

BASE_STYLE = (
    "body{font-family:Arial,sans-serif;background:#f5f7fb;color:#1f2937;margin:0;padding:24px;}"
    ".container{max-width:880px;margin:0 auto;}"
    ".header-section{display:flex;justify-content:space-between;align-items:center;margin-bottom:16px;}"
    ".subtitle{color:#6b7280;margin-top:4px;}"
    ".message{padding:10px 14px;border-radius:8px;margin-bottom:12px;}"
    ".message.success{background:#dcfce7;color:#166534;}"
    ".message.error{background:#fee2e2;color:#991b1b;}"
    ".message.info{background:#dbeafe;color:#1e40af;}"
    ".form-container,.tickets-container,.gracias-container{background:white;border:1px solid #e5e7eb;"
    "border-radius:12px;padding:20px;}"
    ".form-group{margin-bottom:14px;display:flex;flex-direction:column;gap:4px;}"
    ".form-hint{color:#6b7280;font-size:12px;}"
    ".required{color:#dc2626;}"
    ".step-indicator{display:flex;align-items:center;gap:8px;margin-bottom:16px;}"
    ".step{opacity:.5;}.step.active,.step.completed{opacity:1;}"
    ".step-line{flex:1;height:2px;background:#e5e7eb;}"
    ".button-group,.tickets-actions{display:flex;gap:8px;}"
    ".inline{display:inline;}"
    ".archivo-item{display:flex;gap:12px;align-items:center;}"
    ".ticket-card{border:1px solid #e5e7eb;border-radius:8px;margin-bottom:8px;}"
    ".ticket-header-clickable{display:flex;justify-content:space-between;width:100%;background:none;"
    "border:none;padding:10px;cursor:pointer;text-align:left;}"
    ".ticket-header-content{display:flex;gap:8px;align-items:center;}"
    ".ticket-body{padding:10px;border-top:1px solid #e5e7eb;}"
    ".ticket-email{color:#6b7280;margin-left:8px;}"
    ".prioridad-5{color:#991b1b;}.prioridad-4{color:#c2410c;}.prioridad-3{color:#a16207;}"
    ".prioridad-1{color:#166534;}"
)


def escape(value: object) -> str:
    return html.escape(str(value), quote=True)


def message_banner(message: StatusMessage | None) -> str:
    if message is None:
        return ""
    return f"<div class='message {escape(message.kind)}'>{escape(message.text)}</div>"


def post_button(action: str, label: str, css_class: str = "btn-primary", *, disabled: bool = False) -> str:
    disabled_attr = " disabled" if disabled else ""
    return (
        f"<form method='post' action='{escape(action)}' class='inline'>"
        f"<button type='submit' class='{escape(css_class)}'{disabled_attr}>{escape(label)}</button>"
        "</form>"
    )


def page(title: str, body: str, *, refresh_seconds: float | None = None) -> str:
    refresh = ""
    if refresh_seconds is not None:
        refresh = f"<meta http-equiv='refresh' content='{max(1, round(refresh_seconds))}'>"
    return (
        "<!doctype html><html lang='es'><head><meta charset='utf-8'>"
        f"{refresh}<title>{escape(title)}</title>"
        f"<style>{BASE_STYLE}</style></head><body><div class='container'>"
        f"{body}"
        "</div></body></html>"
    )
