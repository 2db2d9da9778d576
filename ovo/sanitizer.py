"""
Content sanitisation for user-generated comment bodies.

The policy mirrors a typical "user generated content" allowlist: basic
formatting, lists, quotes, code, headings, tables, links and images are
kept; everything else is stripped.  ``<script>`` and ``<style>`` elements
are removed together with their text.  Only ``content`` fields go through
here; issuer metadata is stored as submitted.
"""
import nh3

UGC_TAGS = {
    "a", "abbr", "acronym", "b", "bdi", "bdo", "blockquote", "br",
    "caption", "cite", "code", "col", "colgroup", "dd", "del", "details",
    "dfn", "div", "dl", "dt", "em", "figcaption", "figure",
    "h1", "h2", "h3", "h4", "h5", "h6", "hr", "i", "img", "ins", "kbd",
    "li", "mark", "ol", "p", "pre", "q", "rp", "rt", "ruby", "s", "samp",
    "small", "span", "strike", "strong", "sub", "summary", "sup",
    "table", "tbody", "td", "tfoot", "th", "thead", "time", "tr", "tt",
    "u", "ul", "var", "wbr",
}

UGC_ATTRIBUTES = {
    "*": {"title", "lang", "dir"},
    "a": {"href"},
    "img": {"src", "alt", "width", "height"},
    "ol": {"start", "reversed"},
    "td": {"colspan", "rowspan"},
    "th": {"colspan", "rowspan", "scope"},
    "time": {"datetime"},
    "q": {"cite"},
    "blockquote": {"cite"},
}

URL_SCHEMES = {"http", "https", "mailto"}

# Set on every surviving <a>; "rel" must therefore stay out of UGC_ATTRIBUTES.
LINK_REL = "nofollow noopener noreferrer"


def sanitize(text: str) -> str:
    """Return *text* with all markup outside the UGC policy removed."""
    return nh3.clean(
        text,
        tags=UGC_TAGS,
        attributes=UGC_ATTRIBUTES,
        url_schemes=URL_SCHEMES,
        link_rel=LINK_REL,
        strip_comments=True,
    )
