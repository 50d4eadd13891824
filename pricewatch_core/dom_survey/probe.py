"""
DOM Probe - the only code in the survey that talks to the page.

A single in-page program answers small requests (``op``) so strategies
never ship their own JavaScript:

    describe  - describe every element matching a selector
    focus     - focus the n-th match and report whether it took focus
    blur      - blur whatever is focused
    exists    - whether any element matches a selector
    meta      - page title and meta description

An invalid selector yields an empty/negative answer rather than an error.
"""

from typing import Any, Dict, List

PROBE_JS = r"""
(req) => {
    const query = (selector) => {
        try {
            return Array.from(document.querySelectorAll(selector));
        } catch (e) {
            return null;
        }
    };

    const selectorFor = (el) => {
        const tag = el.tagName.toLowerCase();
        if (el.id) return '#' + CSS.escape(el.id);
        const cls = typeof el.className === 'string'
            ? el.className.split(/\s+/).filter(c => c.trim())
            : [];
        if (cls.length > 0) return tag + '.' + CSS.escape(cls[0]);
        const parent = el.parentElement;
        if (!parent) return tag;
        const same = Array.from(parent.children).filter(c => c.tagName === el.tagName);
        return same.length > 1 ? `${tag}:nth-of-type(${same.indexOf(el) + 1})` : tag;
    };

    const describe = (el) => {
        const rect = el.getBoundingClientRect();
        const style = window.getComputedStyle(el);
        const attributes = {};
        for (const attr of el.attributes) attributes[attr.name] = attr.value;
        const hasBox = rect.width > 0 || rect.height > 0;
        const inViewport = rect.bottom > 0 && rect.right > 0
            && rect.top < window.innerHeight && rect.left < window.innerWidth;
        return {
            tag: el.tagName.toLowerCase(),
            selector: selectorFor(el),
            attributes,
            text: (el.textContent || '').trim().slice(0, 300),
            visible: hasBox && inViewport
                && style.display !== 'none' && style.visibility !== 'hidden',
            box: hasBox
                ? { x: rect.x, y: rect.y, width: rect.width, height: rect.height }
                : null,
        };
    };

    switch (req.op) {
        case 'describe': {
            const nodes = query(req.selector);
            return nodes ? nodes.slice(0, req.limit || 200).map(describe) : [];
        }
        case 'focus': {
            const nodes = query(req.selector);
            const el = nodes ? nodes[req.index] : null;
            if (!el) return false;
            el.focus();
            return document.activeElement === el;
        }
        case 'blur': {
            if (document.activeElement && document.activeElement.blur) {
                document.activeElement.blur();
            }
            return true;
        }
        case 'exists': {
            const nodes = query(req.selector);
            return !!(nodes && nodes.length > 0);
        }
        case 'meta': {
            const meta = document.querySelector('meta[name="description"]');
            return {
                title: document.title || '',
                description: meta ? (meta.getAttribute('content') || '') : '',
            };
        }
        default:
            return null;
    }
}
"""

DEFAULT_LIMIT = 200


class DOMProbe:
    """Thin async wrappers around ``PROBE_JS``."""

    @staticmethod
    async def describe(page, selector: str, limit: int = DEFAULT_LIMIT) -> List[Dict[str, Any]]:
        return await page.evaluate(PROBE_JS, {"op": "describe", "selector": selector, "limit": limit}) or []

    @staticmethod
    async def focus(page, selector: str, index: int) -> bool:
        return bool(await page.evaluate(PROBE_JS, {"op": "focus", "selector": selector, "index": index}))

    @staticmethod
    async def blur(page) -> None:
        await page.evaluate(PROBE_JS, {"op": "blur"})

    @staticmethod
    async def exists(page, selector: str) -> bool:
        return bool(await page.evaluate(PROBE_JS, {"op": "exists", "selector": selector}))

    @staticmethod
    async def metadata(page) -> Dict[str, str]:
        meta = await page.evaluate(PROBE_JS, {"op": "meta"}) or {}
        return {
            "title": meta.get("title") or "",
            "description": meta.get("description") or "",
        }
