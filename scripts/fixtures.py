"""
Static fixture rows loaded by the seed command.
"""
from datetime import datetime
from typing import Any, Dict, List


COMPLETED = "✅ Completed"
PLANNED = "⚪ Planned"


# ============================================
# FEATURES
# ============================================

FEATURES: List[Dict[str, str]] = [
    # Core Cognitive Engine
    {"name": "Core: Context Assembly Pipeline", "overview": "The 'Read Path' that gathers context from all memory modules before calling the LLM.", "status": COMPLETED},
    {"name": "Core: Memory Extraction Pipeline", "overview": "The 'Write Path' that analyzes conversations to extract and store knowledge asynchronously.", "status": COMPLETED},
    {"name": "Core: Autonomous Agent Engine", "overview": "The engine that takes a high-level goal, generates a plan, and executes it step-by-step.", "status": COMPLETED},
    {"name": "Core: Experience Consolidation", "overview": "A background pipeline that learns from successful agent runs to create reusable 'experiences'.", "status": COMPLETED},
    {"name": "Core: Hybrid Memory System", "overview": "The foundational architecture combining Postgres (Episodic/Structured) and Pinecone (Semantic) memory.", "status": COMPLETED},
    {"name": "Core: Multi-Brain Architecture", "overview": "Allows for multiple, isolated 'Brains' (e.g., Work, Personal) with distinct memory namespaces.", "status": COMPLETED},
    
    # UI: Main Hubs & Centers
    {"name": "UI: Dashboard Center", "overview": "The main landing page providing a high-level overview of the entire system.", "status": COMPLETED},
    {"name": "UI: Agent Center", "overview": "A hub for launching, monitoring, and reviewing autonomous agent runs.", "status": COMPLETED},
    {"name": "UI: Brain Center", "overview": "A hub for managing Brain configurations and inspecting raw memory module data.", "status": COMPLETED},
    {"name": "UI: Memory Center", "overview": "The hub for managing structured memory, including Entities and Relationships.", "status": COMPLETED},
    {"name": "UI: Contacts Hub", "overview": "A dedicated UI for managing personal and professional contacts (a part of Structured Memory).", "status": COMPLETED},
    {"name": "UI: Prompts Hub", "overview": "A system for creating, managing, and using reusable prompt templates and multi-step workflows.", "status": COMPLETED},
    {"name": "UI: Tools Hub", "overview": "An interface for managing the agent's capabilities (tools) and their schemas.", "status": COMPLETED},
    {"name": "UI: Projects Hub", "overview": "A hub for managing projects and their associated tasks, including AI-powered summaries.", "status": COMPLETED},
    {"name": "UI: Experiences Hub", "overview": "A UI to view and manage the generalized plans learned from successful agent runs.", "status": COMPLETED},
    {"name": "UI: Data Hub", "overview": "A dashboard for monitoring and managing all connected data sources and storage services.", "status": COMPLETED},
    {"name": "UI: Communication Hub", "overview": "A hub for managing inbound and outbound communication channels.", "status": COMPLETED},
    {"name": "UI: SoulyDev Center", "overview": "An integrated developer control panel with API testing, feature health dashboards, and documentation.", "status": COMPLETED},
    
    # UI: Chat & Conversation
    {"name": "UI: Chat Interface", "overview": "The main conversational UI for interacting with the agent.", "status": COMPLETED},
    {"name": "UI: Message Toolbar", "overview": "A hover-toolbar on messages for actions like copy, bookmark, summarize, and inspect.", "status": COMPLETED},
    {"name": "UI: Cognitive Inspector", "overview": "A modal that shows the detailed backend pipeline execution for a specific message.", "status": COMPLETED},
    {"name": "UI: Proactive Suggestions", "overview": "The AI suggests the next logical step or question after providing a response.", "status": COMPLETED},
    {"name": "UI: Universal Progress Indicator", "overview": "A non-intrusive, top-of-page loading bar for background memory tasks.", "status": COMPLETED},
    {"name": "UI: Slash Commands in Chat", "overview": "Ability to trigger agent runs and workflows directly from the chat input using '/' commands.", "status": COMPLETED},
    
    # UI: Global & UX
    {"name": "UX: Global Keyboard Shortcuts", "overview": "A comprehensive set of keyboard shortcuts for power users.", "status": COMPLETED},
    {"name": "UX: Right-Click Context Menu", "overview": "A global context menu for quick access to all major application functions.", "status": COMPLETED},
    {"name": "UX: Notification System", "overview": "A system for displaying success, error, and info notifications.", "status": COMPLETED},
    {"name": "UX: Persistent UI Settings", "overview": "User-specific UI settings (e.g., font size, theme) are saved to the database.", "status": COMPLETED},
    {"name": "UX: Theming Engine", "overview": "Allows switching between Dark, Light, and Solarized themes.", "status": COMPLETED},
    
    # Planned
    {"name": "Agent: True ReAct Loop", "overview": "Upgrade the autonomous agent from executing a fixed plan to a true ReAct loop where it can dynamically choose tools based on observations.", "status": PLANNED},
    {"name": "UI: Command Palette (Cmd+K)", "overview": "A global 'Cmd+K' interface to quickly search for and execute any action in the app.", "status": PLANNED},
    {"name": "UI: Global Search", "overview": "A single search bar that searches across everything: conversations, messages, contacts, and memory.", "status": PLANNED},
]


# ============================================
# SUBSYSTEMS (roadmap cards, in display order)
# ============================================

SUBSYSTEMS: List[Dict[str, Any]] = [
    {
        "id": "soulycore",
        "name": "SoulyCore - Cognitive Engine",
        "description": "The central AI brain managing memory and reasoning.",
        "progress": 85,
        "health_score": "A",
        "dependencies": [],
        "resources": [
            {"name": "GitHub Repo", "url": "#"},
            {"name": "Google Docs", "url": "#"},
        ],
        "milestones": [
            {"description": "V2 Cognitive Architecture Implemented", "completed": True},
            {"description": "Context Assembly Pipeline Complete", "completed": True},
            {"description": "Memory Extraction Pipeline Complete", "completed": False},
        ],
        "github_stats": {"commits": 128, "pullRequests": 12, "issues": 3, "repoUrl": "#"},
        "tasks": {
            "completed": ["Implement Episodic Memory", "Implement Semantic Memory"],
            "remaining": ["Optimize Context Pruning"],
        },
    },
    {
        "id": "hedra-ui",
        "name": "HedraUI - Main Frontend",
        "description": "The primary user interface built with Next.js and React.",
        "progress": 95,
        "health_score": "A+",
        "dependencies": ["soulycore"],
        "resources": [
            {"name": "GitHub Repo", "url": "#"},
            {"name": "Figma", "url": "#"},
        ],
        "milestones": [
            {"description": "Dashboard Center Complete", "completed": True},
            {"description": "Agent Center Complete", "completed": True},
            {"description": "Implement Theming Engine", "completed": False},
        ],
        "github_stats": {"commits": 256, "pullRequests": 25, "issues": 1, "repoUrl": "#"},
        "tasks": {
            "completed": ["Build Dashboard", "Build Agent Center", "Implement Navigation"],
            "remaining": ["Add i18n support"],
        },
    },
    {
        "id": "hedrasoul",
        "name": "HedraSoul - API Orchestrator",
        "description": "The main Laravel-based API gateway and business logic hub.",
        "progress": 60,
        "health_score": "B",
        "dependencies": ["soulycore"],
        "resources": [
            {"name": "GitHub Repo", "url": "#"},
            {"name": "Notion", "url": "#"},
        ],
        "milestones": [
            {"description": "User Authentication Complete", "completed": True},
            {"description": "Implement Core Endpoints", "completed": True},
            {"description": "Integrate with HedraLife", "completed": False},
        ],
        "github_stats": {"commits": 78, "pullRequests": 8, "issues": 5, "repoUrl": "#"},
        "tasks": {
            "completed": ["Setup Laravel project", "Implement JWT Auth"],
            "remaining": ["Build Billing Module", "Write API documentation"],
        },
    },
]


# ============================================
# DATA SOURCES
# ============================================
# Sources not listed here are removed on seed.

DATA_SOURCES: List[Dict[str, Any]] = [
    # Connected
    {"name": "Vercel Postgres", "provider": "Vercel", "type": "relational_db", "status": "connected",
     "stats_json": [{"label": "Tables", "value": 25}, {"label": "Latency", "value": "55ms"}]},
    {"name": "Pinecone KnowledgeBase", "provider": "Pinecone", "type": "vector", "status": "connected",
     "stats_json": [{"label": "Vectors", "value": "1.2M"}, {"label": "Latency", "value": "120ms"}]},
    {"name": "Upstash Vector", "provider": "Upstash", "type": "vector", "status": "connected",
     "stats_json": [{"label": "Vectors", "value": "250k"}, {"label": "Latency", "value": "45ms"}]},
    {"name": "Vercel KV", "provider": "Vercel", "type": "key_value", "status": "connected",
     "stats_json": [{"label": "Keys", "value": 4096}, {"label": "Latency", "value": "30ms"}]},
    {"name": "Vercel Blob", "provider": "Vercel", "type": "blob", "status": "connected",
     "stats_json": [{"label": "Files", "value": 128}, {"label": "Size", "value": "2.3GB"}]},
    {"name": "Vercel MongoDB", "provider": "Vercel", "type": "document_db", "status": "connected",
     "stats_json": [{"label": "Docs", "value": "8.1M"}, {"label": "Size", "value": "12.5GB"}]},
    {"name": "Vercel Redis", "provider": "Vercel", "type": "cache", "status": "connected",
     "stats_json": [{"label": "Keys", "value": 4096}, {"label": "Latency", "value": "30ms"}]},
    {"name": "Vercel GraphDB", "provider": "Vercel", "type": "graph", "status": "connected",
     "stats_json": [{"label": "Objects", "value": 1572}, {"label": "Latency", "value": "80ms"}]},
    
    # Not configured yet
    {"name": "Google Drive", "provider": "Google", "type": "file_system", "status": "needs_config", "stats_json": []},
    {"name": "Self-Hosted MySQL", "provider": "Self-Hosted", "type": "relational_db", "status": "needs_config", "stats_json": []},
    {"name": "Supabase", "provider": "Supabase", "type": "relational_db", "status": "needs_config", "stats_json": []},
]


# ============================================
# VERSION HISTORY
# ============================================

VERSIONS: List[Dict[str, Any]] = [
    {
        "version": "0.1.0",
        "release_date": datetime(2024, 7, 20, 10, 0),
        "changes": """
- **Initial Release:** Deployed the foundational SoulyCore application.
- **Core Features:** Implemented conversation management, chat UI, and the initial memory system.
- **Dev Tools:** Launched the first version of the SoulyDev Center with a Features Dictionary.""",
    },
    {
        "version": "0.2.0",
        "release_date": datetime(2024, 7, 22, 10, 0),
        "changes": """
- **New: Versioning System!**
  - Added a version card to the header to display the current version.
  - Implemented a hover panel on the version card to show recent changes.
  - Created a full Version Log modal to view all historical updates.
- **New: Development Guidelines**
  - Added a formal document outlining the development workflow and rules for AI agents.
- **Backend:**
  - Added the `version_history` table to the database.
  - Created new API endpoints at `/api/version/...` to serve version data.""",
    },
    {
        "version": "0.3.0",
        "release_date": datetime(2024, 7, 23, 10, 0),
        "changes": """
- **Bug Fix & Stability:** Fixed a critical layout 'jumping' bug in the chat window by implementing a more robust scrolling mechanism.
- **Code Health:** Resolved multiple TypeScript type errors, most notably in the Context Menu component.
- **UX:** Layout shifts on load have been eliminated for a smoother user experience.""",
    },
    {
        "version": "0.3.1",
        "release_date": datetime(2024, 7, 24, 10, 0),
        "changes": """
- **Bug Fix: Keyboard Shortcuts:** Shortcuts now work before the first interaction; the app focuses itself when entering fullscreen mode.
- **Improvement: Fullscreen Mode:** Removed mobile view constraints so the application uses the entire screen.""",
    },
    {
        "version": "0.4.0",
        "release_date": datetime(2024, 7, 25, 10, 0),
        "changes": """
- **Major UI Overhaul:** New 'glassmorphism' and 'metal' visual theme across the application.
- **New: Progress & Status System:**
  - Added a top-loading progress bar for view navigation.
  - Added a global App Status Bar for background tasks.
- **New: Settings Architecture:**
  - All UI settings (font size, alignment) are now saved to the database.
  - Model selection is now a dynamic dropdown populated from the backend.
- **Bug Fixes:**
  - Fixed non-functional actions in the Header and Right-Click Context Menu.
  - Fixed non-functional message bubble alignment buttons.""",
    },
    {
        "version": "0.4.1",
        "release_date": datetime(2024, 7, 26, 10, 0),
        "changes": """
- **Critical Bug Fix: 500 Errors:** Resolved multiple 500 Internal Server Errors on deployments.
  - Fixed a bug in the conversation update API that caused all settings changes to fail.
  - Improved error reporting for dashboard APIs when environment variables are missing.
- **UI Fix: Version Log Modal:** Replaced the transparent background with a solid one.""",
    },
    {
        "version": "0.4.2",
        "release_date": datetime(2024, 7, 27, 10, 0),
        "changes": """
- **UI/UX Polish:**
  - **Custom Scrollbars:** A modern scrollbar design across the entire application.
  - **Layout Fix:** The bottom Status Bar now respects the sidebar width.
  - **Readability:** The changelog modal forces Left-to-Right text direction for its content.
- **Bug Fixes:**
  - Message bubbles are no longer hidden or cut off.""",
    },
    {
        "version": "0.4.3",
        "release_date": datetime(2024, 7, 28, 10, 0),
        "changes": """
- **UX: The Ultimate Scrollbar:** Gradient thumbs, hover glow effects and cross-browser support.
- **Bug Fix: Hidden Messages:** The first chat message is no longer hidden behind the top header.
- **Visual Polish:** Refined message list container scrolling behavior.""",
    },
]


# ============================================
# DOCUMENTATION & GOALS
# ============================================
# Document content is read from docs/<file> when present.

DOCUMENTS: List[Dict[str, str]] = [
    {"key": "vision", "title": "Project Vision", "file": "00_Project_Vision.md"},
    {"key": "system_arch", "title": "System Architecture", "file": "01_System_Architecture.md"},
    {"key": "cognitive_model", "title": "Cognitive Model", "file": "02_Cognitive_Model.md"},
    {"key": "core_engine", "title": "Core Engine Deep Dive", "file": "03_Core_Engine_Deep_Dive.md"},
    {"key": "api_ref", "title": "API Reference", "file": "04_API_Reference.md"},
    {"key": "db_schema", "title": "Database Schema", "file": "05_Database_Schema.md"},
    {"key": "frontend_arch", "title": "Frontend Architecture", "file": "06_Frontend_Architecture.md"},
    {"key": "setup", "title": "Setup & Deployment", "file": "07_Setup_And_Deployment.md"},
    {"key": "security", "title": "Security Model", "file": "08_Security_Model.md"},
    {"key": "workflow", "title": "Development Workflow", "file": "09_Development_Workflow.md"},
]

HEDRA_GOALS: Dict[str, str] = {
    "main_goal": (
        "تحقيق الإدارة والأتمتة الكاملة لحياة \"هدرا\" بكل تفاصيلها وعلى جميع الأصعدة الشخصية والمهنية. "
        "يتضمن ذلك خلق منظومة بيئية رقمية شاملة, ذكية, واستباقية, تتفهم وتساعد وتتطور معه, "
        "مما يمكّن من تحقيق أقصى أداء, صحة مثالية, ووعي عميق بالذات."
    ),
    "ideas": (
        "سيتم تحقيق المهمة من خلال بناء **HedraSoul**, وهي منظومة بيئية معيارية قائمة على مبدأ `API-First` "
        "وتتألف من خدمات مصغرة متخصصة. **SoulyCore**, العقل المعرفي المركزي, سيوفر الذاكرة والقدرة على "
        "الاستنتاج لجميع الأنظمة الفرعية."
    ),
    "status": (
        "بدأ التطوير الأولي للأنظمة التأسيسية. تم تأسيس **HedraSoul (Laravel)** ليكون هيئة التنسيق الأساسية. "
        "**SoulyCore** يخضع حاليًا لتصميم معماري نشط, مع التركيز على إنشاء محرك ذاكرة واستنتاج معرفي متطور ومتعدد الطبقات."
    ),
}


# ============================================
# API ENDPOINT REGISTRY
# ============================================

API_ENDPOINTS: List[Dict[str, Any]] = [
    {"method": "GET", "path": "/api/health", "group_name": "system", "description": "Health check."},
    {"method": "GET", "path": "/api/bookmarks", "group_name": "bookmarks", "description": "Get all bookmarked messages."},
    {"method": "GET", "path": "/api/brains", "group_name": "brains", "description": "Get all brain configurations."},
    {"method": "POST", "path": "/api/brains", "group_name": "brains", "description": "Create a new brain.",
     "default_body_json": {"name": "Test Brain", "configJson": {"module": "default"}}, "expected_status_code": 201},
    {"method": "GET", "path": "/api/contacts", "group_name": "contacts", "description": "Get all contacts."},
    {"method": "POST", "path": "/api/contacts", "group_name": "contacts", "description": "Create a new contact.",
     "default_body_json": {"name": "Test Contact", "email": "test@example.com"}, "expected_status_code": 201},
    {"method": "GET", "path": "/api/conversations", "group_name": "conversations", "description": "Get all conversations."},
    {"method": "POST", "path": "/api/conversations", "group_name": "conversations", "description": "Create a new conversation.",
     "default_body_json": {"title": "New Test Chat"}, "expected_status_code": 201},
    {"method": "GET", "path": "/api/entities", "group_name": "entities", "description": "Get all entities."},
    {"method": "POST", "path": "/api/entities", "group_name": "entities", "description": "Create a new entity.",
     "default_body_json": {"name": "Test Entity", "type": "Test Type"}, "expected_status_code": 201},
    {"method": "GET", "path": "/api/features", "group_name": "features", "description": "Get all features."},
    {"method": "POST", "path": "/api/features", "group_name": "features", "description": "Create a new feature.",
     "default_body_json": {"name": "Test Feature", "status": PLANNED}, "expected_status_code": 201},
    {"method": "GET", "path": "/api/inspect/some-uuid", "group_name": "inspect", "description": "Get pipeline run details for a message."},
    {"method": "GET", "path": "/api/logs/all", "group_name": "logs", "description": "Get all logs."},
    {"method": "DELETE", "path": "/api/logs/all", "group_name": "logs", "description": "Delete all logs."},
    {"method": "POST", "path": "/api/logs/create", "group_name": "logs", "description": "Create a new log entry.",
     "default_body_json": {"message": "Test log", "level": "info"}, "expected_status_code": 201},
    {"method": "GET", "path": "/api/prompts", "group_name": "prompts", "description": "Get all prompts."},
    {"method": "POST", "path": "/api/prompts", "group_name": "prompts", "description": "Create a new prompt.",
     "default_body_json": {"name": "Test Prompt", "content": "This is a test."}, "expected_status_code": 201},
    {"method": "GET", "path": "/api/settings", "group_name": "settings", "description": "Get all application settings."},
    {"method": "PUT", "path": "/api/settings", "group_name": "settings", "description": "Update application settings.",
     "default_body_json": {"enableDebugLog": {"enabled": True}}},
    {"method": "POST", "path": "/api/summarize", "group_name": "summarize", "description": "Summarize a block of text.",
     "default_body_json": {"text": "This is a long text to summarize."}},
    {"method": "GET", "path": "/api/tests", "group_name": "tests", "description": "Get all feature test cases."},
]
