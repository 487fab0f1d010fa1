"""Built-in daily pūjā flows for the supported traditions."""

from ritual_coach.domain.models import Region, RitualStep, Tradition, TraditionFlow

tradition_labels: dict[str, str] = {
    "andhra_smarta": "Andhra Smārta",
    "vaishnava": "Vaishnava",
}

region_labels: dict[str, str] = {
    "south": "South Indian",
    "north": "North Indian",
}

smarta_daily_flow = TraditionFlow(
    name="Smārta Daily Pūjā",
    steps=(
        RitualStep(
            id="smarta-1",
            title="Saṅkalpa (संकल्प)",
            description="Set intention for the ritual with proper date and purpose",
            duration_minutes=2,
            materials=("kuśa grass", "water", "flowers"),
            mantras=("sankalpa_mantra",),
        ),
        RitualStep(
            id="smarta-2",
            title="Ācamana (आचमन)",
            description="Purification through sipping water while reciting mantras",
            duration_minutes=3,
            materials=("clean water", "spoon"),
            mantras=("achamana_mantra",),
        ),
        RitualStep(
            id="smarta-3",
            title="Gaṇapati Dhyāna (गणपति ध्यान)",
            description="Invocation of Lord Gaṇeśa to remove obstacles",
            duration_minutes=5,
            materials=("ganapati image/murti", "flowers", "kumkum"),
            mantras=("ganapati_dhyana", "vakratunda_mahakaya"),
        ),
        RitualStep(
            id="smarta-4",
            title="Ṣoḍaśopacāra Pūjā (षोडशोपचार पूजा)",
            description="Sixteen-step worship of the chosen deity",
            duration_minutes=15,
            materials=(
                "deity image/murti",
                "flowers",
                "incense",
                "lamp",
                "kumkum",
                "turmeric",
                "sandalwood paste",
                "rice",
                "fruits",
                "water",
                "bell",
            ),
            mantras=("dhyana_sloka", "avahana", "asana", "pada_prakshalana"),
        ),
        RitualStep(
            id="smarta-5",
            title="Ārati (आरती)",
            description="Offering of light to the deity with devotional songs",
            duration_minutes=5,
            materials=("camphor", "lamp", "bell"),
            mantras=("arati_mantra",),
        ),
    ),
    materials=(
        "deity images/murtis",
        "flowers",
        "incense sticks",
        "camphor",
        "oil lamp",
        "kumkum",
        "turmeric",
        "sandalwood paste",
        "rice",
        "fruits",
        "water",
        "bell",
        "kuśa grass",
    ),
    mantras=(
        "sankalpa_mantra",
        "achamana_mantra",
        "ganapati_dhyana",
        "vakratunda_mahakaya",
        "dhyana_sloka",
        "arati_mantra",
    ),
)

vaishnava_daily_flow = TraditionFlow(
    name="Vaishnava Daily Pūjā",
    steps=(
        RitualStep(
            id="vaishnava-1",
            title="Saṅkalpa (संकल्प)",
            description="Set intention dedicating the ritual to Lord Viṣṇu",
            duration_minutes=2,
            materials=("tulasī leaves", "water", "flowers"),
            mantras=("sankalpa_mantra",),
        ),
        RitualStep(
            id="vaishnava-2",
            title="Ācamana (आचमन)",
            description="Purification while remembering Lord Viṣṇu",
            duration_minutes=3,
            materials=("clean water", "spoon"),
            mantras=("achamana_mantra", "vishnu_names"),
        ),
        RitualStep(
            id="vaishnava-3",
            title="Viṣṇu Dhyāna (विष्णु ध्यान)",
            description="Meditation on Lord Viṣṇu's divine form",
            duration_minutes=5,
            materials=("viṣṇu image/śālagrāma", "tulasī leaves", "flowers"),
            mantras=("vishnu_dhyana", "om_namo_narayanaya"),
        ),
        RitualStep(
            id="vaishnava-4",
            title="Tulasī Arcana (तुलसी अर्चना)",
            description="Special worship of sacred Tulasī plant",
            duration_minutes=5,
            materials=("tulasī plant", "water", "flowers", "kumkum"),
            mantras=("tulasi_stotram", "tulasi_namaskara"),
        ),
        RitualStep(
            id="vaishnava-5",
            title="Ṣoḍaśopacāra to Viṣṇu (षोडशोपचार)",
            description="Sixteen-step worship of Lord Viṣṇu",
            duration_minutes=10,
            materials=(
                "viṣṇu image/śālagrāma",
                "tulasī leaves",
                "flowers",
                "incense",
                "lamp",
                "sandalwood paste",
                "rice",
                "fruits",
                "water",
                "bell",
            ),
            mantras=("vishnu_sahasranama", "purusha_sukta"),
        ),
        RitualStep(
            id="vaishnava-6",
            title="Ārati (आरती)",
            description="Offering of light with Vaishnava bhajans",
            duration_minutes=5,
            materials=("camphor", "lamp", "bell"),
            mantras=("vishnu_arati",),
        ),
    ),
    materials=(
        "viṣṇu image/śālagrāma",
        "tulasī plant and leaves",
        "flowers",
        "incense sticks",
        "camphor",
        "oil lamp",
        "sandalwood paste",
        "rice",
        "fruits",
        "water",
        "bell",
        "conch shell (optional)",
    ),
    mantras=(
        "sankalpa_mantra",
        "achamana_mantra",
        "vishnu_dhyana",
        "om_namo_narayanaya",
        "tulasi_stotram",
        "vishnu_sahasranama",
        "vishnu_arati",
    ),
)

_REGIONAL_VARIATIONS: dict[tuple[str, str], tuple[str, ...]] = {
    ("andhra_smarta", "south"): (
        "Use coconut oil lamps",
        "Offer jasmine and marigold flowers",
        "Include banana and coconut as fruits",
        "Use Telugu mantras alongside Sanskrit",
    ),
    ("andhra_smarta", "north"): (
        "Use mustard oil or ghee lamps",
        "Offer roses and lotus flowers",
        "Include apples and pomegranates as fruits",
        "Use Hindi translations of mantras",
    ),
    ("vaishnava", "south"): (
        "Emphasize Tulasī worship",
        "Use sandalwood paste liberally",
        "Offer sweet rice (paramaanna)",
        "Include specific South Indian bhajans",
    ),
    ("vaishnava", "north"): (
        "Include Rādhā-Kṛṣṇa worship",
        "Use white sandalwood paste",
        "Offer kheer and sweets",
        "Include Braj bhajans and kirtans",
    ),
}

_DIETARY_GUIDELINES: dict[str, tuple[str, ...]] = {
    "andhra_smarta": (
        "Avoid onion and garlic on festival days",
        "Prefer sattvic foods during vratas",
        "No non-vegetarian food on ritual days",
        "Avoid eating before morning pūjā",
    ),
    "vaishnava": (
        "Strict vegetarian diet always",
        "No onion, garlic, mushrooms, or root vegetables",
        "Offer all food to Kṛṣṇa before eating",
        "Avoid caffeine and stimulants during festivals",
    ),
}


def get_tradition_flow(tradition: Tradition, region: Region) -> TraditionFlow:
    """Return the daily flow for a tradition; regions share the same steps."""
    if tradition == "vaishnava":
        return vaishnava_daily_flow
    return smarta_daily_flow


def get_regional_variations(tradition: Tradition, region: Region) -> list[str]:
    return list(_REGIONAL_VARIATIONS.get((tradition, region), ()))


def get_dietary_guidelines(tradition: Tradition) -> list[str]:
    return list(_DIETARY_GUIDELINES.get(tradition, ()))
