"""Category catalog derived from the tool records."""

import logging
from typing import List, Optional

from ..models import CategoryResponse, RecordKind
from ..repositories.predicates import ArrayContains, SortSpec, all_of
from ..repositories.types import CategoryRecord
from ..utils import slugify
from .query_builder import readable_by

logger = logging.getLogger(__name__)

FEATURED_LIMIT = 3
DEFAULT_ICON = "🔧"

CATEGORY_METADATA = {
    "Animation & 3D Modeling": ("Tools for creating and manipulating 3D models, animations, and visual effects.", "🎨"),
    "Art & Image Generator": ("AI-powered tools for generating and creating artistic images and designs.", "🖼️"),
    "Audio": ("Tools for audio processing, enhancement, and generation.", "🎵"),
    "Avatars": ("Create and customize AI-generated avatars and profile pictures.", "👤"),
    "Chat Bot": ("AI chatbots and conversational agents for various purposes.", "💬"),
    "Code": ("Tools for code generation, analysis, and development assistance.", "👨‍💻"),
    "Code & Database Assistant": ("AI assistants for coding, database management, and development tasks.", "💻"),
    "Content Generation & SEO": ("Tools for generating content and optimizing for search engines.", "📝"),
    "Creators Toolkit": ("Essential tools and resources for content creators and artists.", "🛠️"),
    "Customer Support": ("AI-powered tools for customer service and support automation.", "🤝"),
    "Education & Learning": ("Tools for educational content creation and learning assistance.", "📚"),
    "Email Assistant": ("AI tools for email composition, management, and automation.", "📧"),
    "Fashion": ("AI tools for fashion design, styling, and trend analysis.", "👗"),
    "Gaming": ("AI-powered tools and resources for game development and gaming.", "🎮"),
    "Gift Ideas": ("AI assistants for finding and suggesting perfect gifts.", "🎁"),
    "Healthcare": ("AI tools for healthcare, medical analysis, and wellness.", "⚕️"),
    "Human Resources & Resume": ("Tools for HR management, recruitment, and resume creation.", "👥"),
    "Legal": ("AI tools for legal document analysis and assistance.", "⚖️"),
    "Logo Generator": ("Create unique and professional logos using AI.", "🎯"),
    "Music & Audio Generation": ("Tools for generating music and audio content using AI.", "🎼"),
    "Organization & Automation": ("Tools for workflow automation and organizational tasks.", "⚙️"),
    "Photo & Image Editing": ("AI-powered tools for photo manipulation and image editing.", "📸"),
    "Plugins & Extensions": ("AI-powered plugins and extensions for various platforms.", "🔌"),
    "Sales & Marketing": ("AI tools for sales automation and marketing optimization.", "📈"),
    "Search Engines": ("AI-powered search engines and discovery tools.", "🔍"),
    "Social Networks & Dating": ("AI tools for social networking and relationship building.", "💘"),
    "Speech": ("Tools for speech recognition and processing.", "🗣️"),
    "Text": ("AI tools for text analysis and manipulation.", "📄"),
    "Text To Speech": ("Convert text to natural-sounding speech using AI.", "🔊"),
    "Translation & Transcript": ("AI-powered translation and transcription tools.", "🌐"),
    "Video": ("Tools for video creation, editing, and enhancement.", "🎥"),
    "Writing Assistant": ("AI-powered writing aids and content generation tools.", "✍️"),
    "Other": ("Other innovative AI tools and applications.", DEFAULT_ICON),
}


def category_metadata(name: str) -> tuple[str, str]:
    """Description and icon for a category name."""
    if name in CATEGORY_METADATA:
        return CATEGORY_METADATA[name]
    return f"Collection of AI tools for {name.lower()}.", DEFAULT_ICON


class CategoryService:
    """Service for rebuilding and reading the category catalog."""

    def __init__(self, records, categories):
        """
        Initialize the category service.

        Args:
            records: Record repository scanned for tool categories
            categories: Category repository holding the derived catalog
        """
        self._records = records
        self._categories = categories

    def rebuild(self) -> List[CategoryResponse]:
        """
        Recompute the whole catalog from the current public tools.

        Every stored category is dropped first; one category is then written
        per distinct name found on a public tool, with its public tool count
        and up to three featured public tools ordered by highest average
        rating. The catalog is served anonymously, so private and shared
        tools never contribute to it.

        Returns:
            The new catalog ordered by name
        """
        kind = RecordKind.TOOL.value
        public = readable_by(None)
        tools = self._records.find(kind, public, SortSpec("created_at", descending=False))
        names = sorted({name for tool in tools for name in (tool.category.names if tool.category else ())})
        logger.info(f"Found {len(names)} unique categories across {len(tools)} tools")

        by_rating = SortSpec("average_rating", descending=True)
        rebuilt: List[CategoryRecord] = []
        for name in names:
            in_category = all_of(public, ArrayContains("categories", name))
            featured = self._records.find(kind, in_category, by_rating, offset=0, limit=FEATURED_LIMIT)
            description, icon = category_metadata(name)
            rebuilt.append(CategoryRecord(
                name=name,
                slug=slugify(name),
                description=description,
                icon=icon,
                tool_count=self._records.count(kind, in_category),
                featured_tools=[tool.id for tool in featured],
            ))

        removed = self._categories.replace_all(rebuilt)
        logger.info(f"Cleared {removed} categories, created {len(rebuilt)}")
        return [self._to_response(c) for c in rebuilt]

    def list_categories(self) -> List[CategoryResponse]:
        return [self._to_response(c) for c in self._categories.list()]

    def get_category(self, slug: str) -> Optional[CategoryResponse]:
        category = self._categories.get(slug)
        return self._to_response(category) if category else None

    @staticmethod
    def _to_response(category: CategoryRecord) -> CategoryResponse:
        return CategoryResponse(
            name=category.name,
            slug=category.slug,
            description=category.description,
            icon=category.icon,
            tool_count=category.tool_count,
            featured_tools=category.featured_tools,
        )
