"""
Drug availability matching for the pharmacy search screen.

Matching is a case-insensitive substring test on the drug name. These
functions take already-fetched rows and never touch the database, so the
same filter runs for a keystroke and for a realtime re-fetch.
"""
from typing import Dict, Iterable, List, Sequence

def _normalize_query(query) -> str:
    return (query or "").strip().lower()

def drug_matches(drug_name: str, query: str) -> bool:
    return _normalize_query(query) in (drug_name or "").lower()

def search_inventory(rows: Sequence, query) -> List:
    """Return in-stock inventory lines whose drug name contains the query.

    An empty or whitespace-only query returns the rows unfiltered.
    """
    needle = _normalize_query(query)
    if not needle:
        return list(rows)

    return [
        row for row in rows
        if row.in_stock and needle in (row.drug_name or "").lower()
    ]

def pharmacies_stocking(pharmacies: Iterable, query) -> List[Dict]:
    """Group matching in-stock lines by pharmacy.

    Returns ``{"pharmacy": ..., "matching_drugs": [...]}`` for each pharmacy
    with at least one match, in the order given. An empty query returns
    every pharmacy with no matching drugs listed.
    """
    needle = _normalize_query(query)
    results = []
    for pharmacy in pharmacies:
        if not needle:
            results.append({"pharmacy": pharmacy, "matching_drugs": []})
            continue

        matches = search_inventory(pharmacy.inventory, needle)
        if matches:
            results.append({
                "pharmacy": pharmacy,
                "matching_drugs": sorted({row.drug_name for row in matches}),
            })
    return results

def suggest_drugs(names: Iterable[str], query, limit: int = 5) -> List[str]:
    """Distinct drug names containing the query, sorted, capped at ``limit``."""
    needle = _normalize_query(query)
    if not needle:
        return []
    distinct = sorted(set(name for name in names if name))
    return [name for name in distinct if needle in name.lower()][:limit]
