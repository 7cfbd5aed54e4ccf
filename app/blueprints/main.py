"""Main blueprint — public landing page and crawler files.

Route Map:
  GET /             — landing page (hero, services, CTA, contact modal)
  GET /sitemap.xml  — sitemap for search engines
  GET /robots.txt   — crawler rules pointing at the sitemap
"""

from datetime import datetime, timezone

from flask import Blueprint, current_app, make_response, render_template

main_bp = Blueprint("main", __name__)

SITE_DESCRIPTION = (
    "Empowering businesses with expert financial guidance and strategic "
    "solutions tailored to drive sustainable growth and success."
)

KEYWORDS = [
    "business advisory",
    "financial consulting",
    "strategic planning",
    "business consulting",
    "financial advisory",
    "corporate strategy",
    "business growth",
    "financial planning",
    "strategic excellence",
]

SERVICES = [
    {
        "icon": "chart",
        "title": "Financial Advisory",
        "slug": "financial-advisory",
        "description": (
            "Comprehensive financial planning and analysis to optimize your "
            "business performance and maximize profitability."
        ),
    },
    {
        "icon": "target",
        "title": "Strategic Planning",
        "slug": "strategic-planning",
        "description": (
            "Develop robust strategies that align with your vision and position "
            "your business for long-term success."
        ),
    },
    {
        "icon": "briefcase",
        "title": "Business Consulting",
        "slug": "business-consulting",
        "description": (
            "Expert guidance on operations, growth strategies, and organizational "
            "development to elevate your business."
        ),
    },
]

# (path, changefreq, priority)
SITEMAP_ENTRIES = [
    ("", "monthly", "1.0"),
    ("/services", "monthly", "0.9"),
    ("/contact", "monthly", "0.9"),
]


def _site_url():
    return current_app.config["SITE_URL"].rstrip("/")


def _structured_data(site_url, site_name, contact_email):
    """schema.org Organization, WebSite and Service blocks for the landing page."""
    organization = {
        "@context": "https://schema.org",
        "@type": "Organization",
        "name": site_name,
        "url": site_url,
        "logo": f"{site_url}/static/img/melius-logo.svg",
        "description": SITE_DESCRIPTION,
        "address": {
            "@type": "PostalAddress",
            "addressLocality": "Mumbai, Maharashtra",
            "addressCountry": "IN",
        },
        "contactPoint": {
            "@type": "ContactPoint",
            "email": contact_email,
            "contactType": "Customer Service",
        },
    }
    website = {
        "@context": "https://schema.org",
        "@type": "WebSite",
        "name": site_name,
        "url": site_url,
        "description": SITE_DESCRIPTION,
    }
    service = {
        "@context": "https://schema.org",
        "@type": "Service",
        "serviceType": "Business Advisory Services",
        "provider": {"@type": "Organization", "name": site_name},
        "areaServed": "Worldwide",
        "hasOfferCatalog": {
            "@type": "OfferCatalog",
            "name": "Business Advisory Services",
            "itemListElement": [
                {
                    "@type": "Offer",
                    "itemOffered": {
                        "@type": "Service",
                        "name": s["title"],
                        "description": s["description"],
                        "url": f"{site_url}/services#{s['slug']}",
                    },
                    "position": i + 1,
                }
                for i, s in enumerate(SERVICES)
            ],
        },
    }
    return [organization, website, service]


@main_bp.route("/")
def index():
    """Landing page."""
    site_url = _site_url()
    site_name = current_app.config["SITE_NAME"]
    contact_email = current_app.extensions["mail_settings"].recipient_email

    return render_template(
        "landing.html",
        site_url=site_url,
        site_name=site_name,
        description=SITE_DESCRIPTION,
        keywords=KEYWORDS,
        services=SERVICES,
        contact_email=contact_email,
        structured_data=_structured_data(site_url, site_name, contact_email),
        current_year=datetime.now(timezone.utc).year,
    )


@main_bp.route("/sitemap.xml")
def sitemap():
    site_url = _site_url()
    last_mod = datetime.now(timezone.utc).date().isoformat()
    entries = [
        {
            "loc": f"{site_url}{path}",
            "lastmod": last_mod,
            "changefreq": changefreq,
            "priority": priority,
        }
        for path, changefreq, priority in SITEMAP_ENTRIES
    ]
    response = make_response(render_template("sitemap.xml", entries=entries))
    response.headers["Content-Type"] = "application/xml; charset=utf-8"
    return response


@main_bp.route("/robots.txt")
def robots():
    body = f"User-agent: *\nAllow: /\n\nSitemap: {_site_url()}/sitemap.xml\n"
    response = make_response(body)
    response.headers["Content-Type"] = "text/plain; charset=utf-8"
    return response
