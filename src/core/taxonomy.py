"""Fixed service-category taxonomy: leaf categories and the groups over them.

A category filter value names either a group or a leaf; resolve_category()
turns it into a GroupSelector or LeafSelector so callers can dispatch on the
two cases explicitly.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CategoryGroup:
    name: str
    slug: str
    subcategories: tuple[str, ...]


@dataclass(frozen=True)
class GroupSelector:
    """Matches any provider holding one of the group's member slugs."""

    group: CategoryGroup

    @property
    def slugs(self) -> frozenset[str]:
        return frozenset(self.group.subcategories)


@dataclass(frozen=True)
class LeafSelector:
    """Matches providers holding exactly this slug."""

    slug: str


CategorySelector = GroupSelector | LeafSelector


CATEGORY_GROUPS: tuple[CategoryGroup, ...] = (
    CategoryGroup(
        name="Construção e Reformas",
        slug="construcao-reformas",
        subcategories=(
            "pedreiro", "pintor", "gesseiro", "azulejista", "vidraceiro",
            "serralheiro", "marceneiro", "carpinteiro", "impermeabilizador", "mestre-de-obras",
        ),
    ),
    CategoryGroup(
        name="Instalações",
        slug="instalacoes",
        subcategories=(
            "eletricista", "encanador", "instalador-ar-condicionado",
            "instalador-tv-antenas", "instalador-cameras", "instalador-redes",
        ),
    ),
    CategoryGroup(
        name="Limpeza e Organização",
        slug="limpeza-organizacao",
        subcategories=(
            "diarista", "faxineira", "lavador-estofados", "dedetizador", "jardineiro", "piscineiro",
        ),
    ),
    CategoryGroup(
        name="Manutenção e Reparos",
        slug="manutencao-reparos",
        subcategories=(
            "chaveiro", "montador-moveis", "tecnico-eletrodomesticos",
            "tecnico-celular", "tecnico-informatica", "mecanico",
            "eletricista-automotivo", "borracheiro",
        ),
    ),
    CategoryGroup(
        name="Beleza e Estética",
        slug="beleza-estetica",
        subcategories=(
            "cabeleireira", "manicure", "maquiadora", "barbeiro",
            "designer-sobrancelhas", "esteticista", "massagista",
        ),
    ),
    CategoryGroup(
        name="Saúde e Bem-Estar",
        slug="saude-bem-estar",
        subcategories=(
            "personal-trainer", "fisioterapeuta", "nutricionista",
            "cuidador-idosos", "enfermeiro",
        ),
    ),
    CategoryGroup(
        name="Educação e Aulas",
        slug="educacao-aulas",
        subcategories=(
            "professor-particular", "professor-musica", "professor-idiomas", "instrutor-autoescola",
        ),
    ),
    CategoryGroup(
        name="Eventos e Gastronomia",
        slug="eventos-gastronomia",
        subcategories=(
            "cozinheira", "confeiteira", "buffet", "bartender", "dj", "fotografo", "decorador-festas",
        ),
    ),
    CategoryGroup(
        name="Transporte e Mudanças",
        slug="transporte-mudancas",
        subcategories=("motorista-particular", "freteiro", "mudancas", "motoboy"),
    ),
    CategoryGroup(
        name="Serviços Profissionais",
        slug="servicos-profissionais",
        subcategories=(
            "contador", "advogado", "despachante", "designer-grafico",
            "desenvolvedor-sites", "social-media",
        ),
    ),
    CategoryGroup(
        name="Pets",
        slug="pets",
        subcategories=("pet-sitter", "dog-walker", "banho-tosa", "veterinario"),
    ),
)

# (name, slug) of every leaf category seeded in the store.
SERVICE_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("Pedreiro", "pedreiro"),
    ("Pintor", "pintor"),
    ("Gesseiro", "gesseiro"),
    ("Azulejista", "azulejista"),
    ("Vidraceiro", "vidraceiro"),
    ("Serralheiro", "serralheiro"),
    ("Marceneiro", "marceneiro"),
    ("Carpinteiro", "carpinteiro"),
    ("Impermeabilizador", "impermeabilizador"),
    ("Mestre de Obras", "mestre-de-obras"),
    ("Eletricista", "eletricista"),
    ("Encanador", "encanador"),
    ("Instalador de Ar-Condicionado", "instalador-ar-condicionado"),
    ("Instalador de TV e Antenas", "instalador-tv-antenas"),
    ("Instalador de Câmeras", "instalador-cameras"),
    ("Instalador de Redes e Internet", "instalador-redes"),
    ("Diarista", "diarista"),
    ("Faxineira", "faxineira"),
    ("Lavador de Estofados", "lavador-estofados"),
    ("Dedetizador", "dedetizador"),
    ("Jardineiro", "jardineiro"),
    ("Piscineiro", "piscineiro"),
    ("Chaveiro", "chaveiro"),
    ("Montador de Móveis", "montador-moveis"),
    ("Técnico em Eletrodomésticos", "tecnico-eletrodomesticos"),
    ("Técnico em Celular", "tecnico-celular"),
    ("Técnico em Informática", "tecnico-informatica"),
    ("Mecânico", "mecanico"),
    ("Eletricista Automotivo", "eletricista-automotivo"),
    ("Borracheiro", "borracheiro"),
    ("Cabeleireira", "cabeleireira"),
    ("Manicure", "manicure"),
    ("Maquiadora", "maquiadora"),
    ("Barbeiro", "barbeiro"),
    ("Designer de Sobrancelhas", "designer-sobrancelhas"),
    ("Esteticista", "esteticista"),
    ("Massagista", "massagista"),
    ("Personal Trainer", "personal-trainer"),
    ("Fisioterapeuta", "fisioterapeuta"),
    ("Nutricionista", "nutricionista"),
    ("Cuidador de Idosos", "cuidador-idosos"),
    ("Enfermeiro(a)", "enfermeiro"),
    ("Professor Particular", "professor-particular"),
    ("Professor de Música", "professor-musica"),
    ("Professor de Idiomas", "professor-idiomas"),
    ("Instrutor de Autoescola", "instrutor-autoescola"),
    ("Cozinheira", "cozinheira"),
    ("Confeiteira", "confeiteira"),
    ("Buffet", "buffet"),
    ("Bartender", "bartender"),
    ("DJ", "dj"),
    ("Fotógrafo", "fotografo"),
    ("Decorador de Festas", "decorador-festas"),
    ("Motorista Particular", "motorista-particular"),
    ("Freteiro", "freteiro"),
    ("Mudanças", "mudancas"),
    ("Motoboy", "motoboy"),
    ("Contador", "contador"),
    ("Advogado", "advogado"),
    ("Despachante", "despachante"),
    ("Designer Gráfico", "designer-grafico"),
    ("Desenvolvedor de Sites", "desenvolvedor-sites"),
    ("Social Media", "social-media"),
    ("Pet Sitter", "pet-sitter"),
    ("Dog Walker", "dog-walker"),
    ("Banho e Tosa", "banho-tosa"),
    ("Veterinário", "veterinario"),
    # Not part of any group
    ("Costureira", "costureira"),
    ("Sapateiro", "sapateiro"),
    ("Lavanderia", "lavanderia"),
    ("Soldador", "soldador"),
    ("Outros", "outros"),
)

_GROUPS_BY_SLUG: dict[str, CategoryGroup] = {g.slug: g for g in CATEGORY_GROUPS}


def resolve_category(slug: str) -> CategorySelector:
    """Resolve a category filter value into a group or leaf selector.

    Unknown slugs resolve to a LeafSelector; they simply match nothing.
    """
    group = _GROUPS_BY_SLUG.get(slug)
    if group is not None:
        return GroupSelector(group)
    return LeafSelector(slug)


def get_category_group(subcategory_slug: str) -> CategoryGroup | None:
    """Return the group a leaf slug belongs to, if any."""
    for group in CATEGORY_GROUPS:
        if subcategory_slug in group.subcategories:
            return group
    return None


def get_subcategory_slugs(group_slug: str) -> list[str]:
    group = _GROUPS_BY_SLUG.get(group_slug)
    return list(group.subcategories) if group else []


def is_in_group(group_slug: str, slug: str) -> bool:
    group = _GROUPS_BY_SLUG.get(group_slug)
    return group is not None and slug in group.subcategories
