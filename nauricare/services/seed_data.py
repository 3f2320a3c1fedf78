"""
Reference rows: partner pharmacies in Kigali with their stock, and the
learning-centre articles. Seeding is idempotent and keyed on names/slugs.
"""
from sqlalchemy.orm import Session
import logging

from ..models.article import Article
from ..models.pharmacy import Drug, Pharmacy, PharmacyInventory

logger = logging.getLogger(__name__)

PARTNER_PHARMACIES = [
    {
        "name": "Kigali Pharmacy",
        "location": "KN 3 Ave, Kigali",
        "phone": "+250 788 123 456",
        "hours": "8:00 AM - 9:00 PM",
        "latitude": -1.9403,
        "longitude": 30.0587,
        "drugs": ["Metformin", "Ibuprofen", "Paracetamol", "Clomiphene", "Spironolactone",
                  "Oral Contraceptives", "Iron Supplements", "Folic Acid"],
    },
    {
        "name": "Nyamirambo Pharmacy",
        "location": "KN 72 St, Nyamirambo",
        "phone": "+250 788 234 567",
        "hours": "7:30 AM - 8:00 PM",
        "latitude": -1.9756,
        "longitude": 30.0453,
        "drugs": ["Metformin", "Paracetamol", "Letrozole", "Progesterone", "Vitamin D",
                  "Omega-3", "Tranexamic Acid"],
    },
    {
        "name": "Remera Health Pharmacy",
        "location": "KG 11 Ave, Remera",
        "phone": "+250 788 345 678",
        "hours": "8:00 AM - 10:00 PM",
        "latitude": -1.9567,
        "longitude": 30.1127,
        "drugs": ["Ibuprofen", "Naproxen", "Gonadotropins", "GnRH Agonists", "Oral Contraceptives",
                  "Calcium", "Magnesium", "Mefenamic Acid"],
    },
    {
        "name": "Muhima Pharmacy Plus",
        "location": "KN 4 Ave, Muhima",
        "phone": "+250 788 456 789",
        "hours": "7:00 AM - 9:00 PM",
        "latitude": -1.9489,
        "longitude": 30.0522,
        "drugs": ["Metformin", "Clomiphene", "Spironolactone", "Finasteride", "Iron Supplements",
                  "B-Complex Vitamins", "Ulipristal"],
    },
    {
        "name": "Kimironko Wellness Pharmacy",
        "location": "KG 549 St, Kimironko",
        "phone": "+250 788 567 890",
        "hours": "8:00 AM - 8:00 PM",
        "latitude": -1.9389,
        "longitude": 30.1289,
        "drugs": ["Paracetamol", "Ibuprofen", "Letrozole", "Progesterone", "Folic Acid",
                  "Vitamin D", "Evening Primrose Oil", "Inositol"],
    },
]

DEFAULT_STOCK_QUANTITY = 50

ARTICLES = [
    {
        "slug": "pcos-basics",
        "title": "Understanding PCOS",
        "category": "PCOS",
        "read_time": "8 min read",
        "summary": "Learn about Polycystic Ovary Syndrome, its causes, symptoms, and how it affects women across Africa.",
        "content": (
            "Polycystic Ovary Syndrome (PCOS) is one of the most common hormonal disorders affecting women "
            "of reproductive age. It affects approximately 1 in 10 women worldwide, and studies suggest the "
            "prevalence may be even higher among African women.\n\n"
            "PCOS occurs when the ovaries produce higher than normal amounts of androgens, which can "
            "interfere with the development and release of eggs during ovulation.\n\n"
            "Common symptoms include irregular or missed periods, excess hair growth on the face and body, "
            "acne, weight gain, and difficulty getting pregnant due to irregular ovulation.\n\n"
            "Treatment options vary based on your symptoms and goals. Lifestyle changes like diet and "
            "exercise are often the first line of treatment, and regular check-ups with your healthcare "
            "provider are essential."
        ),
    },
    {
        "slug": "fibroids-basics",
        "title": "Understanding Fibroids",
        "category": "Fibroids",
        "read_time": "10 min read",
        "summary": "What are uterine fibroids, who gets them, and what treatment options are available?",
        "content": (
            "Uterine fibroids are non-cancerous growths that develop in or around the uterus. They are made "
            "of muscle and fibrous tissue and can vary greatly in size.\n\n"
            "Fibroids are extremely common, affecting up to 80% of women by age 50. African women are "
            "particularly affected, often developing fibroids at younger ages.\n\n"
            "When symptoms occur, they may include heavy or prolonged menstrual bleeding, pelvic pain or "
            "pressure, frequent urination, and backache.\n\n"
            "Treatment depends on the size, number, and location of fibroids, as well as your symptoms and "
            "desire for future pregnancy."
        ),
    },
    {
        "slug": "mental-health",
        "title": "Managing Stress & Mental Health",
        "category": "Wellness",
        "read_time": "7 min read",
        "summary": "The connection between reproductive health conditions and mental well-being, and strategies for coping.",
        "content": (
            "Living with a reproductive health condition like PCOS or fibroids can take a significant toll "
            "on your mental health.\n\n"
            "It's important to recognize that these feelings are valid and common. Seeking support is a sign "
            "of strength, not weakness.\n\n"
            "Regular physical activity, mindfulness, and a support network of friends, family, and "
            "professionals can all help."
        ),
    },
    {
        "slug": "partner-communication",
        "title": "Talking to Your Partner",
        "category": "Relationships",
        "read_time": "6 min read",
        "summary": "How to communicate about your health challenges with your partner and maintain a healthy relationship.",
        "content": (
            "Open and honest communication with your partner is essential for maintaining a healthy "
            "relationship while managing your health.\n\n"
            "Choose a calm, private moment to have the conversation. Be honest about your symptoms, how they "
            "affect you, and what kind of support you need.\n\n"
            "A supportive partner can make a significant difference in managing a chronic health condition."
        ),
    },
]

def seed_pharmacies(db: Session) -> int:
    """Insert missing partner pharmacies, drugs and stock lines. Returns lines added."""
    drugs = {drug.name: drug for drug in db.query(Drug).all()}
    added = 0

    for entry in PARTNER_PHARMACIES:
        pharmacy = db.query(Pharmacy).filter(Pharmacy.name == entry["name"]).first()
        if not pharmacy:
            pharmacy = Pharmacy(**{k: v for k, v in entry.items() if k != "drugs"})
            db.add(pharmacy)
            db.flush()

        stocked = {line.drug_id for line in pharmacy.inventory}
        for drug_name in entry["drugs"]:
            drug = drugs.get(drug_name)
            if drug is None:
                drug = Drug(name=drug_name)
                db.add(drug)
                db.flush()
                drugs[drug_name] = drug

            if drug.id not in stocked:
                db.add(PharmacyInventory(
                    pharmacy_id=pharmacy.id,
                    drug_id=drug.id,
                    quantity=DEFAULT_STOCK_QUANTITY,
                    in_stock=True
                ))
                stocked.add(drug.id)
                added += 1

    db.commit()
    return added

def seed_articles(db: Session) -> int:
    added = 0
    for entry in ARTICLES:
        if not db.query(Article).filter(Article.slug == entry["slug"]).first():
            db.add(Article(language="en", published=True, **entry))
            added += 1
    db.commit()
    return added

def seed_reference_data(db: Session) -> None:
    lines = seed_pharmacies(db)
    articles = seed_articles(db)
    logger.info(f"Seeded {lines} inventory lines and {articles} articles")
