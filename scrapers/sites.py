"""
Supported listing website. One search-result page is scraped per request; detail pages carry coordinates.

Keys: id, name, base_url, domain, link_contains, detail_regex, card_selectors,
title_selectors, price_selectors, currency_marker, photo_keywords, placeholder_image.
"""

SITE = {
    "id": "dfimoveis",
    "name": "DFImóveis",
    "base_url": "https://www.dfimoveis.com.br",
    "domain": "dfimoveis.com.br",
    # Listing/detail taxonomy. /aluguel/ and /venda/ also match search pages,
    # so those anchors must additionally look like a detail page (detail_regex).
    "link_contains": ["/imovel/", "/aluguel/", "/venda/"],
    "detail_regex": r"/imovel/|/\d+-",
    "card_selectors": [".card-imovel", ".imovel-card", "[data-imovel]", ".property-card"],
    "title_selectors": [".titulo-imovel", ".property-title", "[class*='title']"],
    "price_selectors": [".valor", ".preco", ".price", "[class*='price']", "[class*='valor']"],
    "currency_marker": "R$",
    "photo_keywords": ["imovel", "foto", "image"],
    "placeholder_image": "/placeholder.svg",
}
