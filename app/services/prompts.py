"""Prompt text for fabric replacement edits."""

from app.schemas.fabric import Fabric

CATEGORY_DESCRIPTIONS: dict[str, str] = {
    "cotton": "soft, breathable cotton with a natural texture",
    "velvet": "luxurious velvet with a soft, plush pile and subtle sheen",
    "linen": "natural linen with a relaxed, textured weave",
    "leather": "smooth leather with natural grain and subtle sheen",
    "microfiber": "soft microfiber with a uniform, suede-like texture",
    "wool": "cozy wool with natural warmth and subtle texture",
    "synthetic": "durable synthetic fabric with consistent appearance",
    "patterned": "decorative fabric with the visible pattern design",
}

FALLBACK_MATERIAL = "quality upholstery fabric"


def material_description(category: str) -> str:
    return CATEGORY_DESCRIPTIONS.get(category, FALLBACK_MATERIAL)


def build_fabric_replacement_prompt(fabric: Fabric) -> str:
    """Instruction for re-covering the sofa in the first image with the second image's fabric."""
    return f"""
You are an expert interior designer and photo editor specializing in furniture visualization.

TASK: Re-cover the sofa in the FIRST image with a new slipcover made from the fabric shown in the SECOND image.

FABRIC DETAILS:
- Name: {fabric.name}
- Material: {material_description(fabric.category.value)}
- Description: {fabric.description}

PRESERVE EXACTLY:
- The room (walls, floor, windows, lighting, decorations) and all other objects
- The sofa's shape, size and position
- The camera angle, perspective, lighting and shadows

APPLY THE NEW SLIPCOVER:
- Brand new and pristine: no wrinkles, stains or wear
- Drapes naturally over tufting and cushion seams instead of looking tightly reupholstered
- The swatch texture is clearly visible, with highlights and shadows matching the room light
- Imperfections of the original upholstery are gone

Generate a single photorealistic image of the room with the sofa covered in a new {fabric.name} slipcover.
""".strip()
