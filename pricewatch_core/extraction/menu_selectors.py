"""
Storefront selectors.

The in-page program only reads text; every number is parsed in Python
(see ``menu_parser``) so the rules can be tested without a browser.
"""

# Any of these appearing means the storefront finished rendering
READINESS_SELECTORS = [
    "h1.sc-hKgILt.kNFBOq",
    "h1",
    "section[data-categoryid]",
    ".ProductCard__Box-sc-1wfx2e0-0",
]

MENU_SELECTORS = {
    "restaurant_name": "h1.sc-hKgILt.kNFBOq",
    "category_section": "section[data-categoryid]",
    "category_name": "p.sc-hKgILt.CategorySections__SectionHeading-sc-ls8sfa-0, p.sc-hKgILt.jsaCNc",
    "item_card": ".ProductCard__Box-sc-1wfx2e0-0",
    "item_name": "h2.sc-hKgILt.esHHju",
    "item_description": "strong.sc-hKgILt.fYlAbO",
    "item_footer": ".ProductCard__Footer-sc-1wfx2e0-1",
    "price_box": ".sc-dlfnbm.hmnfCP",
    "discount_badge": "span.sc-lmoMRL.cVMWeE",
    "original_price": "s.sc-hKgILt.fYlAbO",
    "final_price": "span.sc-hKgILt.hxREoh",
    "item_image": ".ProductCard__ImgWrapper-sc-1wfx2e0-3 img",
}

MENU_JS = r"""
(sel) => {
    const clean = (t) => (t || '').trim();
    const firstText = (el) => {
        if (!el) return null;
        for (const node of el.childNodes) {
            if (node.nodeType === 3 && clean(node.textContent)) return clean(node.textContent);
        }
        return null;
    };

    const nameEl = document.querySelector(sel.restaurant_name) || document.querySelector('h1');
    const categories = [];

    document.querySelectorAll(sel.category_section).forEach((section) => {
        const items = [];
        section.querySelectorAll(sel.item_card).forEach((card) => {
            const footer = card.querySelector(sel.item_footer);
            const box = footer ? footer.querySelector(sel.price_box) : null;
            const finalEl = box ? box.querySelector(sel.final_price) : null;
            const img = card.querySelector(sel.item_image);
            items.push({
                name: clean(card.querySelector(sel.item_name)?.textContent),
                description: clean(card.querySelector(sel.item_description)?.textContent),
                badge: footer ? firstText(footer.querySelector(sel.discount_badge)) : null,
                original: box ? clean(box.querySelector(sel.original_price)?.textContent) || null : null,
                final: firstText(finalEl),
                finalFull: finalEl ? clean(finalEl.textContent) : null,
                footer: footer ? clean(footer.textContent) : null,
                image: img ? img.getAttribute('src') : null,
            });
        });
        categories.push({
            id: section.getAttribute('data-categoryid'),
            name: clean(section.querySelector(sel.category_name)?.textContent),
            items,
        });
    });

    return {
        name: clean(nameEl?.textContent),
        url: window.location.href,
        categories,
    };
}
"""
