"""
Deterministic fallback responses for when no live provider is reachable.

Rules are evaluated in order against the lower-cased user text; the first
match wins. When no rule matches, a template chosen by the business stage is
rendered instead. Output depends only on the inputs: item ids are fixed
strings, never timestamps.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple
import logging

from models.action_item import ActionItem
from models.assessment import AssessmentAnswers, IDEA, STARTUP, ESTABLISHED, GROWTH, TRANSITION
from models.conversation import CompletionResult

logger = logging.getLogger(__name__)

OFFLINE_NOTE = "*Note: The assistant is running in offline mode. Configure the provider API key on the server for full AI-powered responses.*"

# (title, description) pairs
ItemSpec = Tuple[str, str]


def contains_any(*keywords: str) -> Callable[[str], bool]:
    """Predicate matching text that contains any of the keywords."""
    return lambda text: any(keyword in text for keyword in keywords)


@dataclass(frozen=True)
class FallbackRule:
    """A canned response selected when ``predicate`` accepts the user text."""
    name: str
    predicate: Callable[[str], bool]
    message: str
    category: str
    items: Sequence[ItemSpec]

    def build_items(self) -> List[ActionItem]:
        return _build_items(self.name, self.category, self.items)


@dataclass(frozen=True)
class StageTemplate:
    """Generic guidance for one business stage."""
    label: str
    tips: Sequence[str]
    category: str
    items: Sequence[ItemSpec]


def _build_items(prefix: str, category: str, specs: Sequence[ItemSpec]) -> List[ActionItem]:
    return [
        ActionItem(
            id=f"fallback-{prefix}-{index + 1}",
            title=title,
            description=description,
            completed=False,
            category=category
        )
        for index, (title, description) in enumerate(specs)
    ]


BUSINESS_PLAN_MESSAGE = f"""Great question about business planning! Here's what I'd recommend:

**Key Components of a Business Plan:**

1. **Executive Summary** - A brief overview of your business concept and goals
2. **Market Analysis** - Research on your target customers and competition in Louisiana
3. **Products/Services** - Detailed description of what you're offering
4. **Marketing Strategy** - How you'll reach customers and stand out
5. **Financial Projections** - Startup costs, revenue forecasts, and break-even analysis
6. **Operations Plan** - Day-to-day business operations and logistics

**Louisiana Resources:**
- The Louisiana Small Business Development Center (LSBDC) offers free business plan assistance
- SCORE Louisiana provides free mentoring from experienced business professionals

Would you like me to dive deeper into any specific section of the business plan?

{OFFLINE_NOTE}"""

FUNDING_MESSAGE = f"""Let me help you explore funding options for your Louisiana business:

**Louisiana-Specific Funding:**
- **Louisiana Economic Development** offers various loan and grant programs
- **Small Business Loan Programs** through Louisiana banks and credit unions
- **Community Development Financial Institutions (CDFI)** like Hope Credit Union

**Federal Programs:**
- **SBA 7(a) Loans** - General purpose small business loans
- **SBA Microloans** - Up to $50,000 for startups
- **SBA 504 Loans** - For real estate and equipment

**Alternative Funding:**
- Angel investors and local investment groups
- Crowdfunding platforms
- Business incubators and accelerators in Louisiana

The best option depends on your specific needs, business stage, and financial situation. Would you like more details on any of these?

{OFFLINE_NOTE}"""

LICENSING_MESSAGE = f"""Here's how registration and licensing generally work for a Louisiana business:

**Register Your Business:**
1. **Choose a structure** - LLC, sole proprietorship, partnership, or corporation
2. **File with the Louisiana Secretary of State** - Use the geauxBIZ portal to register your business name and entity
3. **Get an EIN** - Apply for a free Employer Identification Number from the IRS

**Licenses and Permits:**
- **Louisiana Department of Revenue** - Register for state sales and withholding taxes
- **Parish and city occupational licenses** - Most parishes and municipalities require one
- **Industry-specific permits** - Food service, contractors, and health-related businesses have extra requirements

**If You Have Employees:**
- Register with the Louisiana Workforce Commission for unemployment insurance

Requirements vary by parish and industry, so confirm the details with your local permitting office or a professional advisor.

{OFFLINE_NOTE}"""


FALLBACK_RULES: Tuple[FallbackRule, ...] = (
    FallbackRule(
        name="business-plan",
        predicate=contains_any("business plan"),
        message=BUSINESS_PLAN_MESSAGE,
        category="Planning",
        items=(
            ("Draft an executive summary", "Describe your business concept, goals and what makes it different"),
            ("Research your Louisiana market", "Identify target customers and local competitors"),
            ("Build financial projections", "Estimate startup costs, revenue and your break-even point"),
            ("Book a free LSBDC consultation", "Get expert feedback on your plan at no cost"),
        ),
    ),
    FallbackRule(
        name="funding",
        predicate=contains_any("funding", "loan", "money"),
        message=FUNDING_MESSAGE,
        category="Funding",
        items=(
            ("Review Louisiana Economic Development programs", "Check which state loan and grant programs fit your business"),
            ("Compare SBA loan options", "Look at 7(a), Microloan and 504 programs"),
            ("Contact a local CDFI", "Ask a community lender such as Hope Credit Union about eligibility"),
            ("Prepare financial documents", "Gather projections, statements and a funding request summary"),
        ),
    ),
    FallbackRule(
        name="licensing",
        predicate=contains_any("license", "permit", "register"),
        message=LICENSING_MESSAGE,
        category="Legal",
        items=(
            ("Choose a business structure", "Decide between LLC, sole proprietorship, partnership or corporation"),
            ("Register with the Secretary of State", "File your business through the geauxBIZ portal"),
            ("Apply for an EIN", "Get your federal Employer Identification Number from the IRS"),
            ("Check local license requirements", "Contact your parish and city about occupational licenses and permits"),
        ),
    ),
)


STAGE_TEMPLATES = {
    IDEA: StageTemplate(
        label="exploring a business idea",
        tips=(
            "Validate your idea by talking to potential customers",
            "Research the Louisiana market for your business type",
            "Start with a simple business plan or lean canvas",
            "Connect with the Louisiana Small Business Development Center (LSBDC)",
        ),
        category="Getting Started",
        items=(
            ("Interview potential customers", "Talk to at least five people who might buy from you"),
            ("Research your market", "Look at local demand and competitors in your area"),
            ("Sketch a lean canvas", "Summarize your idea, customers and revenue on one page"),
        ),
    ),
    STARTUP: StageTemplate(
        label="launching a startup",
        tips=(
            "Register your business with the Louisiana Secretary of State",
            "Obtain necessary licenses and permits",
            "Set up a business bank account",
            "Create a basic accounting system",
            "Build your initial customer base",
        ),
        category="Launch",
        items=(
            ("Register your business", "File with the Louisiana Secretary of State"),
            ("Open a business bank account", "Keep business and personal finances separate"),
            ("Set up bookkeeping", "Pick a simple accounting system and track every expense"),
        ),
    ),
    ESTABLISHED: StageTemplate(
        label="running an established business",
        tips=(
            "Focus on customer retention and satisfaction",
            "Look for opportunities to increase efficiency",
            "Consider diversifying your revenue streams",
            "Stay compliant with Louisiana regulations",
            "Invest in employee development",
        ),
        category="Operations",
        items=(
            ("Survey your customers", "Find out what keeps them coming back and what would improve"),
            ("Review your operating costs", "Identify the three largest expenses and ways to trim them"),
            ("Check compliance deadlines", "Confirm state and parish filings are current"),
        ),
    ),
    GROWTH: StageTemplate(
        label="growing and scaling",
        tips=(
            "Identify which products or services drive most of your profit",
            "Plan hiring ahead of demand and document your processes",
            "Explore financing for expansion through SBA and state programs",
            "Look into Louisiana Economic Development incentives for expanding businesses",
        ),
        category="Growth",
        items=(
            ("Analyze your most profitable offerings", "Rank products or services by margin"),
            ("Document key processes", "Write down how core tasks get done before hiring"),
            ("Research expansion incentives", "Review Louisiana Economic Development programs for growing firms"),
        ),
    ),
    TRANSITION: StageTemplate(
        label="a business in transition",
        tips=(
            "Get a professional valuation of your business",
            "Clarify whether you are pivoting, selling, or planning succession",
            "Talk to an attorney and accountant about tax and legal implications",
            "Use SCORE Louisiana mentors who have been through similar transitions",
        ),
        category="Transition",
        items=(
            ("Get a business valuation", "Understand what your business is worth today"),
            ("Define your transition goal", "Decide between pivoting, selling or passing the business on"),
            ("Meet with professional advisors", "Review legal and tax implications before acting"),
        ),
    ),
}

DEFAULT_TEMPLATE = StageTemplate(
    label="your stage",
    tips=(
        "Clarify your goals for the next six months",
        "Connect with the Louisiana Small Business Development Center (LSBDC)",
        "Review the state and local resources available to you",
    ),
    category="Getting Started",
    items=(
        ("Complete the business assessment", "Share your stage and challenges for tailored guidance"),
        ("Contact the LSBDC", "Schedule a free consultation with a business advisor"),
    ),
)


def match_rule(user_text: str) -> Optional[FallbackRule]:
    """Return the first rule whose predicate accepts the lower-cased text."""
    lowered = (user_text or "").lower()
    for rule in FALLBACK_RULES:
        if rule.predicate(lowered):
            return rule
    return None


def generate_fallback_response(user_text: str, answers: Optional[AssessmentAnswers] = None) -> CompletionResult:
    """
    Build a canned response for the user's message.

    Total and deterministic: every input yields a result, and identical
    inputs yield identical results.

    Args:
        user_text: The user's latest message
        answers: Assessment answers for the session

    Returns:
        CompletionResult with a canned message and topic-specific action items
    """
    answers = answers or AssessmentAnswers()

    rule = match_rule(user_text)
    if rule is not None:
        logger.debug(f"Fallback rule matched: {rule.name}")
        return CompletionResult(message=rule.message, progress_items=rule.build_items())

    template = STAGE_TEMPLATES.get(answers.stage, DEFAULT_TEMPLATE)
    logger.debug(f"No fallback rule matched, using stage template: {answers.stage or 'default'}")
    return CompletionResult(
        message=_render_stage_message(template, answers),
        progress_items=_build_items(answers.stage or "default", template.category, template.items)
    )


def _render_stage_message(template: StageTemplate, answers: AssessmentAnswers) -> str:
    industry_clause = f" for {answers.industry} businesses" if answers.industry else ""
    tips = "\n".join(f"- {tip}" for tip in template.tips)
    challenge = answers.main_challenge or "your main concern"

    return f"""Thank you for your question! I'm here to help Louisiana small business owners like you succeed.

Since the assistant is running in offline mode, I'm providing general guidance{industry_clause}. To get personalized, AI-powered responses tailored specifically to your situation, configure the provider API key on the server.

**In the meantime, here are some general tips for {template.label}:**

{tips}

Is there a specific aspect of your business challenge ({challenge}) you'd like to discuss?"""
