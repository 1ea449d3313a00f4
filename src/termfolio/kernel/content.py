"""Portfolio content and the built-in command table."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from termfolio.kernel.registry import CommandRegistry
from termfolio.kernel.types import (
    AsyncCellResult,
    CellContent,
    CellSpec,
    CommandDescriptor,
    RichBlock,
    RichResult,
    TextResult,
)

DEFAULT_JOKE_URL = "https://v2.jokeapi.dev/joke/Any"
DEFAULT_WAIFU_URL = "https://api.waifu.pics/sfw/waifu"

OWNER_LOGIN = "siddharth@portfolio"

WELCOME_MESSAGE = (
    "Hello, World! I'm Siddharth Jindal\n"
    "I'm a Software Developer & AI Engineer.\n"
    "\n"
    "Type 'help' to see available commands."
)

ABOUT_BLOCK = RichBlock(
    title="ABOUT ME",
    paragraphs=(
        "Hi! I'm Siddharth Jindal, a passionate Software Developer and AI Engineer currently "
        "pursuing my B.Tech in Electronics & Computer Engineering at Thapar Institute of "
        "Engineering and Technology, Patiala.",
        "I specialize in building full-stack applications, AI/ML systems, and RAG pipelines. "
        "I have hands-on experience with LLMs, LangChain, vector databases, and modern web "
        "technologies.",
        "Currently working as an SDE Intern at a21.ai, building Text-to-SQL AI agents and RAG "
        "pipelines for enterprise databases.",
    ),
    footer="Competitive Programmer • CodeChef 3-Star • 500+ problems solved",
)

SKILLS_TEXT = """
┌─────────────────────────────────────────────────────────────┐
│  TECHNICAL SKILLS                                           │
├─────────────────────────────────────────────────────────────┤
│                                                             │
│  Languages                                                  │
│  • Python • C/C++ • JavaScript • SQL                        │
│                                                             │
│  Backend & APIs                                             │
│  • Node.js • Express.js • REST APIs                         │
│  • OAuth 2.0 • Authentication                               │
│                                                             │
│  Frontend                                                   │
│  • React                                                    │
│                                                             │
│  Databases                                                  │
│  • MongoDB • MySQL • Redis • Pinecone                       │
│                                                             │
│  DevOps & Tools                                             │
│  • Git • GitHub • Docker • Postman                          │
│  • VS Code • CI/CD • Render • Vercel                        │
│                                                             │
│  AI/ML                                                      │
│  • Generative AI • RAG • LLMs (GPT-4, Claude)               │
│  • Prompt Engineering • LangChain • NLP                     │
│  • Transformers • Vector Databases                          │
│                                                             │
│  Core CS                                                    │
│  • Data Structures & Algorithms • OOP • DBMS                │
│  • Operating Systems • Computer Networks                    │
│                                                             │
└─────────────────────────────────────────────────────────────┘
"""

PROJECTS_TEXT = """
┌─────────────────────────────────────────────────────────────┐
│  FEATURED PROJECTS                                          │
├─────────────────────────────────────────────────────────────┤
│                                                             │
│  01. AI Terminal Assistant (CLI)                            │
│      Tech: Rust, Electron, Groq API, OpenAI API, Node.js    │
│      • Conversational terminal assistant for natural        │
│        language command execution                           │
│      • LLM-powered command translation and file management  │
│      • Windows, macOS and Linux support                     │
│                                                             │
│  02. Customer Relationship Management (CRM) Platform        │
│      Tech: React, Node.js, Express, MongoDB, Redis          │
│      • Full-stack CRM managing 500+ customer records        │
│      • Google OAuth, Redis caching, RESTful APIs            │
│      → https://mini-crm-1-gmzf.onrender.com                 │
│                                                             │
│  03. Medical Help Chatbot (GenAI & RAG)                     │
│      Tech: Python, LangChain, Pinecone, Streamlit           │
│      • RAG-based healthcare assistant over medical docs     │
│      • Vector embeddings for semantic search                │
│                                                             │
└─────────────────────────────────────────────────────────────┘
"""

EXPERIENCE_TEXT = """
┌─────────────────────────────────────────────────────────────┐
│  WORK EXPERIENCE                                            │
├─────────────────────────────────────────────────────────────┤
│                                                             │
│  ▸ SDE Intern — a21.ai                                      │
│    Jan 2026 – Present | Onsite                              │
│    • Full-stack Text-to-SQL AI agent over enterprise data   │
│    • Agentic document extraction pipelines                  │
│    • RAG pipelines tuned for retrieval accuracy and latency │
│                                                             │
│  ▸ Artificial Intelligence Intern — Infosys                 │
│    Nov 2024 – Feb 2025 | Remote                             │
│    • Medical Help Chatbot using RAG, LangChain and          │
│      OpenAI/Groq APIs                                       │
│    • Pinecone integration and prompt engineering            │
│    • NLP pipeline with Hugging Face Transformers            │
│                                                             │
└─────────────────────────────────────────────────────────────┘
"""

EDUCATION_TEXT = """
┌─────────────────────────────────────────────────────────────┐
│  EDUCATION                                                  │
├─────────────────────────────────────────────────────────────┤
│                                                             │
│  Thapar Institute of Engineering and Technology             │
│     Patiala, India                                          │
│     • B.Tech in Electronics and Computer Engineering        │
│     • CGPA: 7.63 / 10.0                                     │
│     • Oct 2022 – Jul 2026                                   │
│                                                             │
└─────────────────────────────────────────────────────────────┘
"""

ACHIEVEMENTS_TEXT = """
┌─────────────────────────────────────────────────────────────┐
│  ACHIEVEMENTS & CERTIFICATIONS                              │
├─────────────────────────────────────────────────────────────┤
│                                                             │
│  CodeChef 3-Star Coder                                      │
│     → Platforms: CodeChef (sjindal456), Codeforces          │
│     → 500+ problems solved                                  │
│                                                             │
│  Principles of Generative AI Certification                  │
│     Transformer architectures, diffusion models, and        │
│     responsible AI practices                                │
│                                                             │
│  Open Source Contributor                                    │
│     AI/ML and web development projects on GitHub            │
│                                                             │
└─────────────────────────────────────────────────────────────┘
"""

CONTACT_TEXT = """
┌─────────────────────────────────────────────────────────────┐
│  CONTACT                                                    │
├─────────────────────────────────────────────────────────────┤
│                                                             │
│  Email      siddharthjindal456@gmail.com                    │
│  GitHub     github.com/siddharthj2                          │
│  LinkedIn   linkedin.com/in/siddharth-jindal                │
│                                                             │
│  Always open to collaborating on interesting projects,      │
│  AI/ML research, or competitive programming chats!          │
│                                                             │
└─────────────────────────────────────────────────────────────┘
"""


def parse_joke_payload(payload: Dict[str, Any]) -> CellContent:
    if payload.get("error"):
        raise ValueError("joke endpoint reported an error")
    if payload.get("type") == "single":
        joke = str(payload["joke"]).strip()
        if not joke:
            raise ValueError("empty joke")
        return RichBlock(title="JOKE", paragraphs=(joke,))
    setup = str(payload["setup"]).strip()
    delivery = str(payload["delivery"]).strip()
    return RichBlock(title="JOKE", paragraphs=('"{0}"'.format(setup), delivery))


def parse_waifu_payload(payload: Dict[str, Any]) -> CellContent:
    url = str(payload.get("url") or "").strip()
    if not url:
        raise ValueError("waifu payload has no url")
    return RichBlock(title="WAIFU", paragraphs=(url,))


def joke_cell(url: str = DEFAULT_JOKE_URL) -> CellSpec:
    return CellSpec(
        name="joke",
        url=url,
        loading_text="Fetching a joke for you...",
        failure_text="Failed to fetch joke",
        parse=parse_joke_payload,
    )


def waifu_cell(url: str = DEFAULT_WAIFU_URL) -> CellSpec:
    return CellSpec(
        name="waifu",
        url=url,
        loading_text="Fetching waifu...",
        failure_text="Failed to fetch waifu image",
        parse=parse_waifu_payload,
    )


def render_help_text(registry: CommandRegistry) -> str:
    summaries = registry.list_commands()
    width = max([len(item.name) for item in summaries] + [4])
    lines: List[str] = ["", "Available commands:"]
    for item in summaries:
        lines.append("  {0}  - {1}".format(item.name.ljust(width + 2), item.description))
    lines.append("")
    return "\n".join(lines)


def build_default_registry(
    joke_url: str = DEFAULT_JOKE_URL,
    waifu_url: str = DEFAULT_WAIFU_URL,
    clock: Optional[Callable[[], datetime]] = None,
) -> CommandRegistry:
    now = clock or datetime.now
    holder: List[CommandRegistry] = []

    def _help() -> TextResult:
        return TextResult(render_help_text(holder[0]))

    def _date() -> TextResult:
        return TextResult(now().strftime("%d/%m/%Y, %H:%M:%S"))

    def _static(text: str) -> Callable[[], TextResult]:
        return lambda: TextResult(text)

    registry = CommandRegistry(
        [
            CommandDescriptor("help", "Show this help message", _help),
            CommandDescriptor("about", "Learn about me", lambda: RichResult(ABOUT_BLOCK)),
            CommandDescriptor("skills", "View my technical skills", _static(SKILLS_TEXT)),
            CommandDescriptor("projects", "Browse my projects", _static(PROJECTS_TEXT)),
            CommandDescriptor("experience", "View my work experience", _static(EXPERIENCE_TEXT)),
            CommandDescriptor("education", "View my education", _static(EDUCATION_TEXT)),
            CommandDescriptor(
                "achievements",
                "View my achievements & certifications",
                _static(ACHIEVEMENTS_TEXT),
            ),
            CommandDescriptor("contact", "Get my contact information", _static(CONTACT_TEXT)),
            CommandDescriptor("whoami", "Display current user", _static(OWNER_LOGIN)),
            CommandDescriptor("date", "Show current date and time", _date),
            # Intercepted by the dispatcher; registered for help and completion.
            CommandDescriptor("clear", "Clear the terminal", _static("")),
            CommandDescriptor(
                "waifu",
                "Show a random waifu image",
                lambda: AsyncCellResult(waifu_cell(waifu_url)),
            ),
            CommandDescriptor(
                "joke",
                "Tell a random joke",
                lambda: AsyncCellResult(joke_cell(joke_url)),
            ),
        ]
    )
    holder.append(registry)
    return registry
