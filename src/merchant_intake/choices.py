"""Option lists offered by the select inputs of the application form."""

from __future__ import annotations

from typing import Tuple

US_STATES: Tuple[str, ...] = (
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA",
    "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD",
    "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
    "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC",
    "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
)

CORP_STRUCTURES: Tuple[str, ...] = (
    "Sole Proprietorship",
    "Unincorporated Association",
    "Trust (Not Formed By State Filing)",
    "Government Entity",
    "Public Corporation",
    "Company Registered with SEC",
    "Financial Institution",
    "Non-Profit",
    "Non-Excluded Pooled Investment Vehicle",
    "Limited Liability Company (LLC, Ltd, LC, PLLC)",
    "Partnership (LP, LLP, LLLP, GP)",
    "C Corporation",
    "S Corporation",
    "Trust (Business Trust)",
    "Joint Venture",
    "Other (Please contact account officer)",
)

GATEWAYS: Tuple[str, ...] = (
    "NMI",
    "Authorize.net",
    "Linked2Pay",
    "USAePay",
    "Dejavoo",
    "Valor",
    "Stripe",
    "Square",
    "PayTrace",
    "Other",
)

INDUSTRIES: Tuple[str, ...] = (
    "Insurance",
    "Adult",
    "Advertising Services",
    "Affiliate Marketing",
    "Airline, Lodging, Travel",
    "Alcohol",
    "Auto Sales",
    "Auto Warranties",
    "Background Checks",
    "Bail Bonds",
    "Beauty, Skin & Hair Care",
    "Business Opportunities",
    "Cannabis Dispensary",
    "CBD",
    "CNP Pharmacies",
    "Charities",
    "Coins & Collectables",
    "Computer Sales",
    "Credit Repair & Monitoring",
    "Cryptocurrencies",
    "Dating",
    "Debt Collection",
    "Domain Registration",
    "Drugs & Drug Products",
    "Events & Tickets",
    "E-Wallets",
    "Fantasy Sports",
    "File Sharing",
    "Firearm Sales",
    "Gambling",
    "Gentleman's Club",
    "Government Grants",
    "Health",
    "Coaching",
    "ISP's & Web Hosting",
    "Jewelry",
    "Kratom",
    "Male Enhancement",
    "Marketing",
    "Merchant Aggregators",
    "Money Transfer",
    "Monthly Membership",
    "Moving Services",
    "Nutraceutical",
    "Merchant Service for Online Auctions",
    "Pawn Shops",
    "Peptide",
    "Pet Sales & Accessories",
    "Phone Unlocking Services",
    "Prepaid Phone Cards",
    "Prop Firm",
    "Pyramid Selling / Network Marketing",
    "Restaurants",
    "Self Storage",
    "Smoke Shop",
    "SAAS",
    "Subscription Boxes",
    "Tech Support",
    "Telemedicine",
    "Ticket Brokers",
    "Timeshares & Holiday Clubs",
    "Vape / E-Cig",
    "VPN Services",
    "Web Design / Marketing",
    "Other",
)

# Fields rendered as a select, and what they offer.
SELECT_OPTIONS = {
    "corp_structure": CORP_STRUCTURES,
    "industry": INDUSTRIES,
    "gateway": GATEWAYS,
    "legal_state": US_STATES,
    "loc_state": US_STATES,
    "mail_state": US_STATES,
}
