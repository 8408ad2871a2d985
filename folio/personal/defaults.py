"""
Default portfolio content and record templates.
"""
from typing import Dict

from .models import PortfolioModel, Record, RECORD_TYPES

# Symbolic keys understood by the site's icon registry.
ICON_KEYS = (
    "FaReact",
    "FaNodeJs",
    "FaVuejs",
    "FaAws",
    "FaDocker",
    "FaFigma",
    "FaGitAlt",
    "SiTypescript",
    "SiJavascript",
    "SiHtml5",
    "SiCss3",
    "SiTailwindcss",
    "SiNextdotjs",
    "SiExpress",
    "SiMongodb",
    "SiPostgresql",
    "SiRedis",
    "SiVite",
    "SiWebpack",
    "SiJest",
)

DEFAULT_DOCUMENT: Dict = {
    "name": "Sameer Bavaji",
    "tagline": "I build elegant and performant web applications.",
    "about": (
        "I'm a passionate Full-Stack Developer with a knack for creating beautiful, "
        "functional, and user-centric digital experiences. With a strong foundation "
        "in modern web technologies, I enjoy tackling complex problems and turning "
        "ideas into reality. When I'm not coding, I enjoy exploring new technologies, "
        "contributing to open-source, and brewing the perfect cup of coffee."
    ),
    "resumeUrl": "/resume.pdf",
    "heroImage": "",
    "socials": {
        "github": "https://github.com",
        "linkedin": "https://linkedin.com",
        "twitter": "https://twitter.com",
        "email": "mailto:sameer.bavaji@example.com",
    },
    "experiences": [],
    "education": [],
    "projects": [],
    "certificates": [],
    "skills": [
        {"title": "Frontend", "skills": [
            {"name": "React", "icon": "FaReact", "color": "#61DAFB"},
            {"name": "Next.js", "icon": "SiNextdotjs", "color": "#000000"},
            {"name": "Vue.js", "icon": "FaVuejs", "color": "#4FC08D"},
            {"name": "TypeScript", "icon": "SiTypescript", "color": "#3178C6"},
            {"name": "JavaScript", "icon": "SiJavascript", "color": "#F7DF1E"},
            {"name": "HTML5", "icon": "SiHtml5", "color": "#E34F26"},
            {"name": "CSS3", "icon": "SiCss3", "color": "#1572B6"},
            {"name": "Tailwind CSS", "icon": "SiTailwindcss", "color": "#06B6D4"},
        ]},
        {"title": "Backend", "skills": [
            {"name": "Node.js", "icon": "FaNodeJs", "color": "#339933"},
            {"name": "Express", "icon": "SiExpress", "color": "#000000"},
            {"name": "PostgreSQL", "icon": "SiPostgresql", "color": "#4169E1"},
            {"name": "MongoDB", "icon": "SiMongodb", "color": "#47A248"},
            {"name": "Redis", "icon": "SiRedis", "color": "#DC382D"},
        ]},
        {"title": "Cloud & DevOps", "skills": [
            {"name": "AWS", "icon": "FaAws", "color": "#FF9900"},
            {"name": "Docker", "icon": "FaDocker", "color": "#2496ED"},
            {"name": "Git", "icon": "FaGitAlt", "color": "#F05032"},
        ]},
        {"title": "Tools", "skills": [
            {"name": "Vite", "icon": "SiVite", "color": "#646CFF"},
            {"name": "Webpack", "icon": "SiWebpack", "color": "#8DD6F9"},
            {"name": "Jest", "icon": "SiJest", "color": "#C21325"},
            {"name": "Figma", "icon": "FaFigma", "color": "#F24E1E"},
        ]},
    ],
}

# Field values for freshly added records, minus the id.
RECORD_TEMPLATES: Dict[str, Dict] = {
    "experiences": {
        "title": "Job Title",
        "company": "Company Name",
        "date": "Year - Year",
        "description": "",
    },
    "education": {
        "degree": "Degree Name",
        "institution": "Institution Name",
        "date": "Year - Year",
        "description": "",
    },
    "projects": {
        "title": "New Project",
        "description": "",
        "image": "https://picsum.photos/seed/new/600/400",
        "tags": [],
        "liveUrl": "#",
        "githubUrl": "#",
    },
    "certificates": {
        "title": "New Certificate",
        "issuer": "",
        "date": "",
        "credentialUrl": "#",
        "image": "https://picsum.photos/seed/new-cert/600/400",
    },
}

NEW_SKILL = {"name": "New Skill", "icon": "FaReact", "color": "#6366F1"}


def default_portfolio() -> PortfolioModel:
    """Build a fresh default model; callers may mutate the result freely."""
    return PortfolioModel.model_validate(DEFAULT_DOCUMENT)


def new_record(collection: str, record_id: int) -> Record:
    """Create a template record for `collection` carrying `record_id`.

    Raises:
        KeyError: if `collection` is not an identified collection
    """
    record_type = RECORD_TYPES[collection]
    return record_type.model_validate({"id": record_id, **RECORD_TEMPLATES[collection]})


def is_known_icon(key: str) -> bool:
    return key in ICON_KEYS
