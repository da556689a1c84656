from __future__ import annotations

from html import escape


def public_form_url(base_url: str, form_id: str) -> str:
    return f"{base_url.rstrip('/')}/form/{form_id}"


def build_embed_codes(
    base_url: str,
    form_id: str,
    title: str,
    width: str = "100%",
    height: str = "600px",
) -> dict[str, str]:
    """
    Share snippets for a published form: a direct link, an <iframe> embed
    and a plain anchor tag.
    """
    url = public_form_url(base_url, form_id)
    safe_url = escape(url, quote=True)
    safe_title = escape(title or "", quote=True)

    iframe_code = (
        "<iframe \n"
        f'  src="{safe_url}" \n'
        f'  width="{escape(width, quote=True)}" \n'
        f'  height="{escape(height, quote=True)}" \n'
        '  frameborder="0" \n'
        '  style="border: none; border-radius: 8px; box-shadow: 0 4px 6px -1px rgba(0, 0, 0, 0.1);"\n'
        f'  title="{safe_title}"\n'
        "></iframe>"
    )
    link_code = (
        f'<a href="{safe_url}" target="_blank" rel="noopener noreferrer">\n'
        f"  {safe_title}\n"
        "</a>"
    )
    return {"form_url": url, "iframe_code": iframe_code, "link_code": link_code}
