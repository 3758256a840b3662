from __future__ import annotations
from typing import Dict, List, Tuple

DEFAULT_EMOJI = "🥘"

# Tabla estática (categoría, {clave: emoji}). Claves en minúsculas.
INGREDIENT_EMOJIS: List[Tuple[str, Dict[str, str]]] = [
    ("viandes", {
        "poulet": "🍗", "volaille": "🍗", "dinde": "🍗",
        "bœuf": "🥩", "boeuf": "🥩", "steak": "🥩", "veau": "🥩",
        "porc": "🥓", "jambon": "🥓", "lard": "🥓", "lardons": "🥓",
        "agneau": "🐑", "saucisse": "🌭",
    }),
    ("poissons", {
        "poisson": "🐟", "saumon": "🐟", "truite": "🐟", "thon": "🐟", "cabillaud": "🐟",
        "crevette": "🦐", "crevettes": "🦐", "crabe": "🦀", "homard": "🦞",
        "moule": "🦪", "moules": "🦪", "huître": "🦪", "calamar": "🦑",
    }),
    ("légumes", {
        "tomate": "🍅", "carotte": "🥕", "brocoli": "🥦", "aubergine": "🍆",
        "poivron": "🫑", "piment": "🌶️", "maïs": "🌽", "champignon": "🍄",
        "pomme de terre": "🥔", "patate": "🥔", "patate douce": "🍠",
        "concombre": "🥒", "courgette": "🥒", "laitue": "🥬", "salade": "🥬",
        "épinard": "🥬", "chou": "🥬", "avocat": "🥑", "oignon": "🧅",
        "échalote": "🧅", "ail": "🧄", "gousse d'ail": "🧄", "petits pois": "🫛",
    }),
    ("fruits", {
        "pomme": "🍎", "poire": "🍐", "banane": "🍌", "orange": "🍊",
        "clémentine": "🍊", "citron": "🍋", "citron vert": "🍋", "fraise": "🍓",
        "framboise": "🍓", "raisin": "🍇", "pastèque": "🍉", "melon": "🍈",
        "pêche": "🍑", "abricot": "🍑", "cerise": "🍒", "ananas": "🍍",
        "kiwi": "🥝", "mangue": "🥭", "noix de coco": "🥥", "myrtille": "🫐",
    }),
    ("produits laitiers", {
        "lait": "🥛", "lait de coco": "🥥", "fromage": "🧀", "parmesan": "🧀",
        "mozzarella": "🧀", "gruyère": "🧀", "beurre": "🧈",
        "yaourt": "🥛", "yogourt": "🥛", "crème": "🥛", "crème fraîche": "🍶",
    }),
    ("œufs", {
        "œuf": "🥚", "oeuf": "🥚", "œufs": "🥚", "oeufs": "🥚",
    }),
    ("féculents", {
        "pain": "🍞", "baguette": "🥖", "riz": "🍚", "pâtes": "🍝", "pates": "🍝",
        "spaghetti": "🍝", "macaroni": "🍝", "nouilles": "🍜", "farine": "🌾",
        "croissant": "🥐", "pâte feuilletée": "🥐", "lentilles": "🫘", "pois chiches": "🫘",
    }),
    ("condiments", {
        "sel": "🧂", "poivre": "🧂", "sucre": "🍬", "miel": "🍯", "huile": "🫗",
        "huile d'olive": "🫒", "olive": "🫒", "vinaigre": "🫗", "moutarde": "🌭",
        "chocolat": "🍫", "vanille": "🍦",
    }),
    ("noix", {
        "cacahuète": "🥜", "cacahouète": "🥜", "arachide": "🥜",
        "noix": "🌰", "noisette": "🌰", "amande": "🌰", "châtaigne": "🌰",
    }),
    ("boissons", {
        "vin": "🍷", "vin blanc": "🥂", "bière": "🍺", "café": "☕", "thé": "🍵", "eau": "💧",
    }),
]


def _norm(s: str) -> str:
    return s.strip().lower()


def _by_key_length(table: List[Tuple[str, Dict[str, str]]]) -> List[Tuple[str, str]]:
    entries = [(key, emoji) for _, mapping in table for key, emoji in mapping.items()]
    # las claves más largas (más específicas) primero; el orden de la tabla desempata
    entries.sort(key=lambda kv: len(kv[0]), reverse=True)
    return entries


_SUBSTRING_ORDER = _by_key_length(INGREDIENT_EMOJIS)


def classify(name: str) -> str:
    """
    Emoji representativo de un ingrediente.

    1) coincidencia exacta con alguna clave (gana la primera categoría que la tenga);
    2) si no, la clave más larga contenida en el nombre;
    3) si nada coincide, el emoji genérico de plato.
    """
    n = _norm(name or "")
    if not n:
        return DEFAULT_EMOJI
    for _, mapping in INGREDIENT_EMOJIS:
        if n in mapping:
            return mapping[n]
    for key, emoji in _SUBSTRING_ORDER:
        if key in n:
            return emoji
    return DEFAULT_EMOJI


def classify_many(names: List[str]) -> Dict[str, str]:
    return {name: classify(name) for name in names}
