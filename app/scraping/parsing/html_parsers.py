"""
BeautifulSoup-based extraction of competitor marketing data.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Tag

from app.domain.competitor import CompetitorRecord

COMPANY_NAME_SELECTOR = "header h1, footer .company-name"
PRODUCT_SELECTOR = ".product, .product-item"
PRODUCT_NAME_SELECTOR = ".product-name, .product-title"
PRODUCT_DESCRIPTION_SELECTOR = ".product-description, .product-desc"
PRICING_SELECTOR = ".price, .pricing"
CONTACT_SELECTOR = ".contact-info, .contact-us"
SOCIAL_LINK_SELECTOR = (
    'a[href*="facebook.com"], a[href*="twitter.com"], '
    'a[href*="linkedin.com"], a[href*="instagram.com"]'
)
HEADLINE_SELECTOR = ".news-item h3, .press-release h2"
FEATURE_SELECTOR = ".feature, .benefit, .key-point"


class HTMLParsingLayer:
    """
    Deterministic selector heuristics for competitor landing pages.
    """

    @classmethod
    def parse_competitor(cls, *, html: str, fallback_name: str = "") -> CompetitorRecord:
        soup = BeautifulSoup(html, "html.parser")
        product_names, product_descriptions = cls.extract_products(soup)
        return CompetitorRecord(
            name=cls.extract_company_name(soup) or fallback_name,
            product_names=product_names,
            product_descriptions=product_descriptions,
            pricing=cls._texts(soup, PRICING_SELECTOR),
            contact_info=cls.extract_contact_info(soup),
            social_links=cls.extract_social_links(soup),
            headlines=cls._texts(soup, HEADLINE_SELECTOR),
            features=cls._texts(soup, FEATURE_SELECTOR),
        )

    @classmethod
    def extract_company_name(cls, soup: BeautifulSoup) -> str:
        node = soup.select_one(COMPANY_NAME_SELECTOR)
        if node is None:
            return ""
        return cls._clean_text(node.get_text(" ", strip=True))

    @classmethod
    def extract_products(cls, soup: BeautifulSoup) -> tuple[list[str], list[str]]:
        """
        Names and descriptions are collected independently, so the two lists
        may differ in length when a product lacks one of them.
        """

        names: list[str] = []
        descriptions: list[str] = []
        for node in soup.select(PRODUCT_SELECTOR):
            name = cls._joined_text(node, PRODUCT_NAME_SELECTOR)
            description = cls._joined_text(node, PRODUCT_DESCRIPTION_SELECTOR)
            if name:
                names.append(name)
            if description:
                descriptions.append(description)
        return names, descriptions

    @classmethod
    def extract_contact_info(cls, soup: BeautifulSoup) -> str:
        parts = [node.get_text(" ", strip=True) for node in soup.select(CONTACT_SELECTOR)]
        return cls._clean_text(" ".join(parts))

    @staticmethod
    def extract_social_links(soup: BeautifulSoup) -> list[str]:
        links: list[str] = []
        for node in soup.select(SOCIAL_LINK_SELECTOR):
            href = node.get("href")
            if isinstance(href, str) and href.strip():
                links.append(href.strip())
        return links

    @classmethod
    def _texts(cls, soup: BeautifulSoup, selector: str) -> list[str]:
        texts: list[str] = []
        for node in soup.select(selector):
            text = cls._clean_text(node.get_text(" ", strip=True))
            if text:
                texts.append(text)
        return texts

    @classmethod
    def _joined_text(cls, node: Tag, selector: str) -> str:
        parts = [child.get_text(" ", strip=True) for child in node.select(selector)]
        return cls._clean_text(" ".join(parts))

    @staticmethod
    def _clean_text(value: str) -> str:
        return re.sub(r"\s+", " ", value).strip()
