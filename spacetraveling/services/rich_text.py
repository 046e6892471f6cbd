import logging
from typing import Callable, Iterable, List, Optional

from markupsafe import Markup, escape

logger = logging.getLogger(__name__)

LinkResolver = Callable[[dict], str]

BLOCK_TAGS = {
    "heading1": "h1",
    "heading2": "h2",
    "heading3": "h3",
    "heading4": "h4",
    "heading5": "h5",
    "heading6": "h6",
    "paragraph": "p",
    "preformatted": "pre",
}
LIST_TAGS = {"list-item": "ul", "o-list-item": "ol"}


def resolve_post_link(link: dict) -> str:
    """Document links point at the post detail page."""
    uid = link.get("uid")
    return f"/post/{uid}" if uid else "/"


def as_text(nodes: Optional[Iterable[dict]], separator: str = " ") -> str:
    return separator.join(node["text"] for node in nodes or [] if "text" in node)


def as_html(
    nodes: Optional[Iterable[dict]], link_resolver: LinkResolver = resolve_post_link
) -> Markup:
    parts: List[str] = []
    open_list: Optional[str] = None

    for node in nodes or []:
        list_tag = LIST_TAGS.get(node.get("type"))
        if open_list and list_tag != open_list:
            parts.append(f"</{open_list}>")
            open_list = None
        if list_tag and open_list is None:
            parts.append(f"<{list_tag}>")
            open_list = list_tag
        parts.append(_serialize_node(node, link_resolver))

    if open_list:
        parts.append(f"</{open_list}>")
    return Markup("".join(parts))


def _serialize_node(node: dict, link_resolver: LinkResolver) -> str:
    node_type = node.get("type")
    if node_type in LIST_TAGS:
        return f"<li>{_serialize_spans(node, link_resolver)}</li>"
    if node_type in BLOCK_TAGS:
        tag = BLOCK_TAGS[node_type]
        label = node.get("label")
        attrs = f' class="{escape(label)}"' if label else ""
        return f"<{tag}{attrs}>{_serialize_spans(node, link_resolver)}</{tag}>"
    if node_type == "image":
        return _serialize_image(node, link_resolver)
    if node_type == "embed":
        return _serialize_embed(node)

    logger.debug(f"Skipping unsupported rich text node: {node_type}")
    return ""


def _serialize_spans(node: dict, link_resolver: LinkResolver) -> str:
    text = node.get("text") or ""
    spans = [
        span
        for span in node.get("spans") or []
        if 0 <= span.get("start", 0) < span.get("end", 0)
    ]
    boundaries = {0, len(text)}
    for span in spans:
        boundaries.add(min(span.get("start", 0), len(text)))
        boundaries.add(min(span["end"], len(text)))
    ordered = sorted(boundaries)

    out = []
    for start, end in zip(ordered, ordered[1:]):
        segment = _escape_text(text[start:end])
        active = [s for s in spans if s.get("start", 0) <= start and s["end"] >= end]
        # first span in the list ends up outermost
        for span in reversed(active):
            segment = _wrap_span(span, segment, link_resolver)
        out.append(segment)
    return "".join(out)


def _escape_text(text: str) -> str:
    return str(escape(text)).replace("\n", "<br />")


def _wrap_span(span: dict, content: str, link_resolver: LinkResolver) -> str:
    span_type = span.get("type")
    data = span.get("data") or {}
    if span_type == "strong":
        return f"<strong>{content}</strong>"
    if span_type == "em":
        return f"<em>{content}</em>"
    if span_type == "label":
        return f'<span class="{escape(data.get("label", ""))}">{content}</span>'
    if span_type == "hyperlink":
        return _link(data, content, link_resolver)
    return content


def _link(link: dict, content: str, link_resolver: LinkResolver) -> str:
    if link.get("link_type") == "Document":
        href = link_resolver(link)
    else:
        href = link.get("url", "")
    target = (
        f' target="{escape(link["target"])}" rel="noopener"'
        if link.get("target")
        else ""
    )
    return f'<a href="{escape(href)}"{target}>{content}</a>'


def _serialize_image(node: dict, link_resolver: LinkResolver) -> str:
    img = f'<img src="{escape(node.get("url", ""))}" alt="{escape(node.get("alt") or "")}" />'
    if node.get("linkTo"):
        img = _link(node["linkTo"], img, link_resolver)
    return f'<p class="block-img">{img}</p>'


def _serialize_embed(node: dict) -> str:
    oembed = node.get("oembed") or {}
    return (
        f'<div data-oembed="{escape(oembed.get("embed_url", ""))}"'
        f' data-oembed-type="{escape(oembed.get("type", ""))}"'
        f' data-oembed-provider="{escape(oembed.get("provider_name", ""))}">'
        f'{oembed.get("html") or ""}</div>'
    )
