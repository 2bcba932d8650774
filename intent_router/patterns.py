"""Static pattern tables for tool intent and query complexity.

Every table is built once at import time and never mutated. Regex tiers are
tuples of compiled patterns; keyed tables are read-only mappings.
"""

import re
from types import MappingProxyType
from typing import Iterable, Mapping

from .models import ModelTier, OutputType, Tool


def _ci(*patterns: str) -> tuple[re.Pattern, ...]:
    """Compile case-insensitive patterns."""
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


def _cs(*patterns: str) -> tuple[re.Pattern, ...]:
    """Compile case-sensitive patterns."""
    return tuple(re.compile(p) for p in patterns)


def any_match(patterns: Iterable[re.Pattern], text: str) -> bool:
    return any(p.search(text) for p in patterns)


def count_matches(patterns: Iterable[re.Pattern], text: str) -> int:
    return sum(1 for p in patterns if p.search(text))


_NGRAM_STRIP = re.compile(r"[^\w\s']")
_WHITESPACE = re.compile(r"\s+")


def normalize_for_ngram(text: str) -> str:
    """Lowercase, drop punctuation except apostrophes, collapse whitespace."""
    text = _NGRAM_STRIP.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", text).strip()


# ========== SELECTION THRESHOLDS ==========

THRESHOLD_HIGH = 0.7
THRESHOLD_MEDIUM = 0.5   # non-auto-enabled tools
THRESHOLD_LOW = 0.2      # auto-enabled tools
CONFIDENCE_FLOOR = 0.3
CLARIFICATION_MIN_CONFIDENCE = 0.4

# Raw signal scores per detection method
SCORE_USER_SELECTED = 1.0
SCORE_EXPLICIT_REQUEST = 0.95
SCORE_FILE_TYPE = 0.9
SCORE_FOLLOWUP = 0.8
SCORE_MODIFICATION = 0.9
SCORE_REFERENCE_MATCHED = 0.8
SCORE_REFERENCE_UNMATCHED = 0.5
SCORE_NGRAM = 0.7
SCORE_REGEX = {"high": 0.7, "medium": 0.5, "low": 0.3}

# Diagnostic regex-only scoring uses its own per-match weights
DIAGNOSTIC_REGEX_WEIGHTS = {"high": 0.4, "medium": 0.25, "low": 0.1}


# ========== N-GRAM PHRASES ==========

NGRAM_PHRASES: Mapping[Tool, tuple[str, ...]] = MappingProxyType({
    Tool.WEB_SEARCH: (
        "what is the current", "what is the latest", "who is the current",
        "latest news on", "latest news about", "current price of", "stock price of",
        "weather in", "weather for", "search the web", "search online for",
        "look up online", "find online", "google search for",
        "check in web", "check the web", "check on web", "check online",
        "look on web", "look on the web", "look in web", "search on web",
        "search on internet", "did you check", "did you search", "can you search",
        "can you check online", "use web search", "use the web", "try the web",
        "try web search",
        "who won the", "score of the", "when is the next", "results of the",
        "happening right now", "happening today", "news today", "today's news",
    ),
    Tool.CODE_INTERPRETER: (
        "analyze this data", "analyze the data", "analyze this csv", "analyze this file",
        "parse this json", "parse the json", "process this data",
        "run this code", "execute this code", "run python code", "write python code",
        "create a chart", "create a graph", "make a chart", "plot the data",
        "visualize this data", "generate a report",
        "calculate the", "compute the", "sum of the", "average of the",
        "convert to csv", "convert to json", "export to excel", "create a spreadsheet",
        "generate a pdf", "create a pdf", "make a pdf", "generate pdf document",
        "create pdf document", "generate a word", "create a word", "make a word",
        "generate word document", "create word document",
        "generate a powerpoint", "create a powerpoint", "make a powerpoint",
        "generate powerpoint presentation", "create powerpoint presentation",
        "generate a ppt", "create a ppt", "make a ppt",
        "generate a presentation", "create a presentation", "make a presentation",
        "generate an excel", "create an excel", "make an excel",
        "generate excel file", "create excel file", "generate xlsx", "create xlsx",
        "generate a csv", "create a csv", "make a csv", "generate csv file",
        "create csv file", "sample csv", "sample spreadsheet", "sample excel",
        "example csv", "example spreadsheet",
        "generate a slide", "create a slide", "make slides",
        "export as pdf", "save as pdf", "export to pdf",
        "export as word", "save as word", "export to word",
        "convert to pdf", "convert to word", "convert to powerpoint",
    ),
    Tool.FILE_SEARCH: (
        "in the document", "in the file", "in the pdf",
        "from the document", "from the file",
        "according to the document", "based on the document",
        "what does the document", "what does the file",
        "search the document", "search the documents",
        "find in the document", "look in the document",
        "summarize the document", "summarize this document",
        "summary of the document", "key points from", "extract from the",
    ),
    Tool.ARTIFACTS: (
        "create a dashboard", "build a dashboard", "generate a dashboard",
        "make a dashboard", "design a dashboard",
        "create an interactive", "build an interactive", "generate an interactive",
        "make an interactive",
        "create a component", "build a component", "generate a component",
        "make a component", "react component for",
        "create a form", "build a form", "generate a form",
        "create a ui", "build a ui", "generate a ui", "make a ui",
        "create a diagram", "draw a diagram", "generate a diagram",
        "create a flowchart", "draw a flowchart", "generate a flowchart",
        "mermaid diagram",
        "generate a chart", "build a chart", "make a chart", "generate a graph",
    ),
    Tool.YOUTUBE_VIDEO: (
        "this youtube video", "this video", "the youtube video", "the video",
        "that video", "that youtube video",
        "get the transcript", "fetch the transcript", "transcript of the video",
        "transcript from youtube", "video transcript", "youtube transcript",
        "summarize the video", "summarize this video", "summary of the video",
        "what is this video about", "what does the video say", "what does this video",
        "from youtube", "on youtube", "youtube.com", "youtu.be",
        "what did they say", "what was said in",
        "key points from the video", "main points from the video",
    ),
})


# ========== CONVERSATION CONTEXT ==========

FOLLOWUP_PATTERNS = _ci(
    r"^(now|next|then|also|and)\b",
    r"\b(now|also|too)\s+(do|make|create|run|show|add)\b",
    r"\b(do\s+)?(the\s+)?same\s+(thing|for|with|but|again)\b",
    r"\b(same\s+)?(thing\s+)?(again|one\s+more\s+time)\b",
    r"\b(another|one\s+more)\b",
    r"\bsimilar(ly)?\s+(to|for|but)\b",
    r"\blike\s+(before|that|the\s+last)\b",
    r"\bcontinue\s+(with|from|the)\b",
    r"\bkeep\s+(going|the|it)\b",
    r"\bgo\s+(on|ahead|further)\b",
)

MODIFICATION_PATTERNS = _ci(
    r"\b(change|modify|update|edit|fix|correct|adjust|tweak)\s+(it|this|that|the)\b",
    r"\b(make|can\s+you\s+make)\s+(it|this|that|the)\s+(more|less|bigger|smaller|different|better)\b",
    r"\b(change|modify|update)\s+(the|this|that)\s+(color|size|style|format|layout|text|title|label)\b",
    r"\b(add|include|insert|put)\s+(a|an|the|some|more)\b.*\b(to|into|in)\s+(it|this|that|the)\b",
    r"\b(remove|delete|take\s+out|get\s+rid\s+of)\b.*\b(from|in)\s+(it|this|that|the)\b",
    r"\b(improve|enhance|polish|refine|clean\s+up)\s+(it|this|that|the)\b",
    r"\b(make\s+it|can\s+you\s+make\s+it)\s+(look|work|perform)\s+(better|nicer|faster|prettier)\b",
)

REFERENCE_PATTERNS: Mapping[OutputType, tuple[re.Pattern, ...]] = MappingProxyType({
    OutputType.CHART: _ci(
        r"\b(the|that|this)\s+(chart|graph|plot|visualization|figure)\b",
        r"\b(in|on|from)\s+(the|that|this)\s+(chart|graph|plot)\b",
    ),
    OutputType.CODE: _ci(
        r"\b(the|that|this)\s+(code|script|function|program)\b",
        r"\b(in|from)\s+(the|that|this)\s+(code|output|result)\b",
    ),
    OutputType.DOCUMENT: _ci(
        r"\b(the|that|this)\s+(document|file|pdf|report)\b",
        r"\b(in|from)\s+(the|that|this)\s+(document|file|pdf)\b",
    ),
    OutputType.UI_COMPONENT: _ci(
        r"\b(the|that|this)\s+(component|dashboard|ui|interface|form)\b",
        r"\b(in|on)\s+(the|that|this)\s+(dashboard|component|form)\b",
    ),
    OutputType.SEARCH_RESULT: _ci(
        r"\b(the|that|those)\s+(search\s+)?results?\b",
        r"\b(from|in)\s+(the|that)\s+(search|web)\b",
    ),
})

OUTPUT_TYPE_TO_TOOL: Mapping[OutputType, Tool] = MappingProxyType({
    OutputType.CHART: Tool.CODE_INTERPRETER,
    OutputType.CODE: Tool.CODE_INTERPRETER,
    OutputType.DOCUMENT: Tool.FILE_SEARCH,
    OutputType.UI_COMPONENT: Tool.ARTIFACTS,
    OutputType.SEARCH_RESULT: Tool.WEB_SEARCH,
})


# ========== TIERED QUERY PATTERNS ==========

QUERY_PATTERNS: Mapping[Tool, Mapping[str, tuple[re.Pattern, ...]]] = MappingProxyType({
    Tool.FILE_SEARCH: MappingProxyType({
        "high": _ci(
            r"\b(search|find|look\s*up|locate|retrieve)\b.*\b(in\s+)?(the\s+)?(documents?|files?|pdfs?|attachments?|uploads?)\b",
            r"\b(in\s+the\s+)?(documents?|files?|pdfs?|attachments?|uploads?)\b.*\b(search|find|look\s*up|locate)\b",
            r"\b(what\s+does|according\s+to|based\s+on|as\s+stated\s+in|as\s+mentioned\s+in)\b.*\b(document|file|pdf|attachment|contract|report|article|paper|manual|guide|specification)\b",
            r"\b(document|file|pdf|attachment|contract|report)\b.*\b(say|mention|state|indicate|describe|explain|specify)\b",
            r"\b(from\s+the\s+)?(uploaded|attached|provided|given)\b.*\b(pdf|document|file|attachment)\b",
            r"\bRAG\b",
            r"\b(cite|quote|reference|excerpt)\b.*\b(from|in)\b.*\b(document|file|pdf|text|passage|section)\b",
            r"\bwhat\s+(is|are|does|do|did|was|were)\b.*\b(in\s+the\s+)?(contract|document|report|agreement|policy|terms|guidelines)\b",
            r"\baccording\s+to\s+(the\s+)?(document|file|pdf|report|contract|agreement|policy)\b",
        ),
        "medium": _ci(
            r"\b(summarize|summary\s+of|overview\s+of|recap)\b.*\b(document|file|pdf|attachment|report|article)\b",
            r"\b(extract|pull\s+out|get)\b.*\b(from|information|data|details|key\s+points)\b",
            r"\b(in\s+the\s+(documents?|files?|pdfs?|attachments?|uploads?))\b",
            r"\b(what\s+is|tell\s+me|explain)\b.*\b(in|about|from)\b.*\b(the\s+)?(document|file|pdf|report)\b",
            r"\b(in\s+the\s+)?(contract|agreement|terms|policy|specification|sla|nda|proposal|invoice|receipt)\b",
            r"\bfind\s+(the\s+)?(section|paragraph|clause|page|part|chapter)\b",
            r"\b(look\s+at|refer\s+to|check|review)\b.*\b(the\s+)?(document|file|pdf|attachment)\b",
            r"\bmentioned\s+(in\s+)?(the\s+)?(document|file|pdf|report)\b",
        ),
        "low": _ci(
            r"\b(summarize|summary|extract|overview)\b",
            r"\b(reference|cite|citation|source|footnote)\b",
            r"\b(manual|handbook|whitepaper|thesis|dissertation|memo|brief)\b",
            r"\b(read|reading|peruse|scan|skim)\b",
        ),
    }),
    Tool.CODE_INTERPRETER: MappingProxyType({
        "high": _ci(
            r"\b(image|static|inline|downloadable|save)\s*(chart|charts|graph|graphs|plot|plots|visualization|visualizations)\b",
            r"\b(analyze|analysis)\b.*\b(data|dataset|spreadsheet|excel|csv|xlsx?|tsv|parquet)\b",
            r"\b(data|dataset|spreadsheet|excel|csv|xlsx?)\b.*\b(analyze|analysis|process|parse)\b",
            r"\b(run|execute|eval|evaluate)\b.*\b(code|script|python|javascript|sql)\b",
            r"\b(create|make|generate|build|draw|render)\b.*\b(chart|graph|plot|visualization|histogram|heatmap|scatter|bar\s*chart|pie\s*chart|line\s*graph)\b",
            r"\b(calculate|compute|determine)\b.*\b(using|with)\b.*\b(code|python|script|program)\b",
            r"\b(parse|process|load|import|read|convert|transform)\b.*\b(the\s+)?(csv|json|xml|excel|xlsx?|yaml|parquet|sql|sqlite)\b",
            r"\b(csv|json|xml|excel|xlsx?|yaml|parquet|sql|sqlite)\b.*\b(file|data)\b.*\b(parse|process|load|read|analyze|convert)\b",
            r"\b(csv|json|xml|excel|xlsx?|yaml|parquet|sql|sqlite)\b.*\b(to|from)\b.*\b(csv|json|xml|excel|xlsx?|yaml|parquet|sql|sqlite)\b",
            r"\b(pandas|numpy|matplotlib|seaborn|scipy|sklearn|scikit|plotly|bokeh|altair)\b",
            r"\b(train|fit|predict|classify|cluster|regression)\b.*\b(model|algorithm|data)\b",
            r"\b(transform|convert|reshape|pivot|merge|join|concatenate)\b.*\b(data|dataframe|table|dataset)\b",
            r"\b(create|make|generate|build|produce|export)\b.*\b(powerpoint|pptx?|presentation|slides?)\b",
            r"\b(create|make|generate|build|produce|export)\b.*\b(word|docx?|document)\b",
            r"\b(create|make|generate|build|produce|export)\b.*\b(pdf|report)\b",
            r"\b(create|make|generate|build|produce|export)\b.*\b(excel|xlsx?|spreadsheet|csv|tsv)\b",
            r"\b(sample|example|dummy|test|mock)\b.*\b(csv|excel|xlsx?|spreadsheet|data\s*file)\b",
            r"\b(create|make|generate|build|produce|export)\b.*\b(zip|archive|tar)\b",
            r"\b(create|make|generate|build|produce|export)\b.*\b(image|png|jpg|jpeg|gif|svg)\b.*\b(file)?\b",
            r"\b(convert|transform|export)\b.*\b(to|as|into)\b.*\b(pdf|docx?|pptx?|xlsx?|csv|json|html)\b",
        ),
        "medium": _ci(
            r"\b(calculate|compute|solve|evaluate)\b.*\b(using|with|in)\b.*\b(code|python|script)\b",
            r"\b(create|make|generate|build|plot|draw)\b.*\b(chart|graph|plot|visualization|diagram|figure)\b",
            r"\b(statistics|statistical|regression|correlation|variance|distribution)\b.*\b(on|of|for|from)\b.*\b(data|file|dataset|csv|excel)\b",
            r"\b(run|perform|do|compute)\b.*\b(statistics|statistical|regression|correlation)\b",
            r"\b(calculate|compute|find)\b.*\b(average|mean|median|mode|sum|std|standard\s*deviation|percentile)\b.*\b(of|for|from|in)\b",
            r"\b(sort|filter|group\s*by|pivot|aggregate)\b.*\b(the\s+)?(data|dataset|table|rows|columns)\b",
            r"\b(transform|process|clean|normalize|standardize)\b.*\b(the\s+)?(data|dataset|file)\b",
            r"\b(python|javascript|js|typescript)\b.*\b(code|script|program|function)\b",
            r"\b(csv|json|xml|xlsx?|parquet|sql)\b.*\b(file|data)\b.*\b(process|analyze|parse|read)\b",
            r"\b(equation|formula|expression)\b.*\b(solve|calculate|evaluate|compute)\b",
            r"\b(time\s*series|trend|forecast)\b.*\b(analysis|analyze|predict|model)\b",
            r"\b(update|modify|change|edit|improve|enhance|refine|fix)\b.*\b(it|this|the|that)\b.*\b(file|document|presentation|slides?|report|chart|graph|code)\b",
            r"\b(make|add)\b.*\b(it|this|the|that)\b.*\b(more|better|nicer|modern|professional|presentable)\b",
            r"\b(add|include|insert)\b.*\b(to|into|in)\b.*\b(it|this|the|that)\b.*\b(file|document|presentation|slides?|report)\b",
        ),
        "low": _ci(
            r"\b(python|javascript|code|script|program|algorithm)\b",
            r"\b(clean|cleaning|preprocess|preprocessing)\b.*\bdata\b",
            r"\b(math|mathematical|arithmetic|numeric|numerical)\b",
            r"\b(table|dataframe|array|matrix|vector|list)\b",
            r"\b(debug|test|verify|validate|check)\b.*\b(code|function|script)\b",
        ),
    }),
    Tool.ARTIFACTS: MappingProxyType({
        "high": _ci(
            r"\bdashboard\b",
            r"\b(interactive|clickable|zoomable|dynamic)\s*(chart|charts|graph|graphs|visualization|visualizations)\b",
            r"\b(create|build|make|generate|develop)\b.*\b(react|vue|angular|svelte)\b.*\b(component|app|application|page)\b",
            r"\b(interactive|dynamic)\b.*\b(component|widget|dashboard|ui|interface|element)\b",
            r"\b(render|display|show|present)\b.*\b(html|component|react|ui|interface|page|widget)\b",
            r"\b(build|create|design|generate|make)\b.*\b(ui|user\s*interface|layout|mockup)\b",
            r"\b(web\s*component|custom\s*element|html\s*element)\b",
            r"\b(svg|canvas)\b.*\b(draw|render|create|generate)\b",
            r"\b(create|build|make)\b.*\b(form|input|button|modal|dialog|dropdown|menu|nav)\b",
            r"\b(mermaid|flowchart|sequence\s*diagram|class\s*diagram|er\s*diagram|gantt)\b",
            r"\b(create|build|make|generate|draw)\b.*\b(diagram|flowchart)\b",
            r"\b(create|build|make|generate)\b.*\b(html|webpage|web\s*page)\b",
            r"\b(recharts|chart\.js|d3|nivo)\b.*\b(chart|graph|component)\b",
        ),
        "medium": _ci(
            r"\b(create|build|make|generate)\b.*\b(component|ui|interface|widget|element|view)\b",
            r"\b(react|vue|angular|svelte|html|css)\b.*\b(component|element|page|view|template)\b",
            r"\b(design|layout|mockup|prototype|wireframe)\b",
            r"\b(style|styled|css|tailwind|bootstrap|material)\b.*\b(component|element|ui)\b",
            r"\b(animate|animation|transition|motion|framer)\b",
            r"\b(card|cards|list|grid|table)\b.*\b(component|layout|view)\b",
        ),
        "low": _ci(
            r"\b(interactive|widget)\b",
            r"\b(react|vue|angular|html|component)\b",
            r"\b(visual|display|render|show|present)\b",
            r"\b(diagram|flowchart)\b",
        ),
    }),
    Tool.WEB_SEARCH: MappingProxyType({
        "high": _ci(
            r"\b(search|look\s*up|find|google|bing)\b.*\b(on\s+the\s+)?(web|internet|online)\b",
            r"\b(web|internet|online)\b.*\b(search|look\s*up|find|query)\b",
            r"\b(current|latest|recent|today|now|live|real.?time)\b.*\b(news|price|weather|events?|updates?|information|data|stock|market|score|results?)\b",
            r"\b(who\s+is|who'?s)\b.*\b(current|the)\b.*\b(president|prime\s*minister|ceo|cfo|chairman|leader|mayor|governor|secretary|director)\b",
            r"\b(current|acting|incumbent)\b.*\b(president|prime\s*minister|ceo|cfo|chairman|leader|mayor|governor|secretary|director)\b",
            r"\b(who\s+(is|are)|what\s+is)\b.*\b(running|leading|winning|in\s+charge)\b",
            r"\b(weather|forecast|temperature|humidity|rain|snow|sunny|cloudy|storm)\b.*\b(in|at|for|near|around)?\s*[A-Z][a-z]+",
            r"\b(what|how|check|get)\b.*\b(weather|forecast|temperature)\b",
            r"\b(is\s+it|will\s+it)\b.*\b(rain|raining|snow|snowing|sunny|hot|cold|warm|cool|humid|windy)\b",
            r"\b(how\s+)(hot|cold|warm|cool|humid|windy)\s+(is|are)\s+it\b",
            r"\b(weather|forecast)\s+(for|in|at|near)\b",
            r"\b(stock|share|crypto|bitcoin|ethereum|btc|eth|doge|solana|xrp)\s*(price|value|quote|ticker)?\b",
            r"\b(price|value|quote)\s*(of|for)\b.*\b(stock|share|crypto|bitcoin|ethereum|btc|eth)\b",
            r"\b(how\s+much\s+is|what\s+is\s+the\s+price)\b.*\b(stock|share|bitcoin|ethereum|crypto)\b",
            r"\b(score|scores|result|results|standing|standings|fixture|fixtures)\b.*\b(of|for|from)?\b",
            r"\b(latest|recent|current|live|final)\b.*\b(score|scores|result|results|game|match|standing)\b",
            r"\b(get|show|tell|what)\b.*\b(score|scores|result|results)\b",
            r"\b(who\s+won|who\s+is\s+winning|did\s+.+\s+win|final\s+score)\b",
            r"\b(how\s+did|how\s+is|how\s+are)\b.*\b(play|playing|do|doing)\b.*\b(game|match|today|yesterday|last\s+night)\b",
            r"\b(nfl|nba|mlb|nhl|premier\s*league|champions\s*league|world\s*cup|la\s*liga|bundesliga|serie\s*a|mls|ufc|f1|formula\s*1)\b",
            r"\b(election|elections|poll|polls|vote|voting|ballot)\b.*\b(results?|winner|leading|update)\b",
            r"\b(who\s+(is|are)\s+)?(winning|leading|ahead)\b.*\b(election|poll|race|primary)\b",
            r"\b(what\s+is|who\s+is|when\s+is|where\s+is|how\s+is)\b.*\b(happening|going\s+on|today|now|currently)\b",
            r"\b(real.?time|live|up.?to.?the.?minute)\b.*\b(data|information|updates?|feed|stream)\b",
            r"\b(in\s+)?202[4-9]\b",
            r"\b(this\s+)?(week|month|year)\b.*\b(news|events?|release|launch|announce)\b",
            r"\b(breaking|latest|trending|viral|just\s+happened|just\s+announced)\b",
            r"\b(current|today'?s?|live)\b.*\b(price|value|rate|stock|forex|crypto|bitcoin|ethereum)\b",
            r"\b(release\s*date|launch\s*date|available|availability|coming\s+out|released)\b.*\b(when|new|latest)\b",
            r"\b(when\s+(is|does|will)|is\s+.+\s+out|has\s+.+\s+released)\b",
            r"\b(stock|share|market\s*cap|revenue|earnings|quarterly|annual\s*report)\b.*\b(today|current|latest|recent)\b",
            r"\b(flight|flights|train|bus)\b.*\b(status|delay|schedule|time|price|cost|book)\b",
            r"\b(traffic|road\s*conditions?|highway|route)\b.*\b(now|current|today)\b",
            r"\b(when\s+is|schedule|scheduled|timing|time\s+of)\b.*\b(game|match|show|concert|event|meeting|conference|super\s*bowl|world\s*cup|olympics|finals?|playoff)\b",
            r"\b(what\s*(?:is|'s)\s+(?:on|happening|playing))\b.*\b(tonight|today|this\s+weekend|now)\b",
            r"\b(what\s+is)\b.*\b(happening|playing|on)\b.*\b(tonight|today|this\s+weekend|now)\b",
            r"\b(when\s+is)\b.*\b(the\s+)?(super\s*bowl|world\s*cup|olympics|world\s*series|nba\s*finals?|stanley\s*cup|championship)\b",
            r"\b(exchange\s*rate|currency|forex)\b.*\b(current|today|now|live)\b",
            r"\b(current|today'?s?|live)\b.*\b(exchange\s*rate|currency|forex)\b",
            r"\b(convert|conversion)\b.*\b(usd|eur|gbp|jpy|dollars?|euros?|pounds?|yen|currency)\b",
            r"\b(usd|eur|gbp|jpy|dollars?|euros?|pounds?|yen)\b.*\b(to|into|in)\b.*\b(usd|eur|gbp|jpy|dollars?|euros?|pounds?|yen)\b",
            r"\b(how\s+much\s+is)\b.*\b(in|to)\b.*\b(usd|eur|gbp|jpy|dollars?|euros?|pounds?|yen)\b",
            r"\b(exchange\s*rate)\b.*\b(usd|eur|gbp|jpy|dollars?|euros?|pounds?|yen)\b",
            r"\b(yesterday|last\s+(week|month|night)|this\s+(morning|week|month))\b.*\b(announce|happen(ed)?|release|news|update)\b",
            r"\b(announce|happen(ed)?|release|news|update)\b.*\b(yesterday|last\s+(week|month|night)|this\s+(morning|week|month))\b",
            r"\b(what|who)\b.*\b(happen(ed)?|announce[d]?|release[d]?)\b.*\b(yesterday|last\s+(week|month)|this\s+(week|month))\b",
            r"\b(recent|latest)\b.*\b(developments?|updates?|news|changes?)\b",
        ),
        "medium": _ci(
            r"\b(search|look\s*up|find|query)\b.*\b(information|details|about|for)\b",
            r"\b(news|article|blog|website|post|publication)\b",
            r"\b(stock|price|market|weather|forex|crypto)\b.*\b(today|current|now|latest)\b",
            r"\b(weather|forecast|temperature|humidity)\b",
            r"\b(what\s*'?s|what\s+is)\b.*\b(new|latest|happening)\b",
            r"\b(find|get|fetch)\b.*\b(from|on)\b.*\b(the\s+)?(web|internet|online)\b",
            r"\b(visit|check|open|go\s+to)\b.*\b(website|site|url|link|page)\b",
            r"\b(twitter|x\.com|facebook|reddit|linkedin|instagram|tiktok|youtube)\b",
            r"\b(what|who|where|when|how)\b.*\b(current|latest|recent|now|today)\b",
            r"\b(current|latest|recent)\b.*\b(what|who|where|when|how)\b",
        ),
        "low": _ci(
            r"\b(current|latest|recent|new|up.?to.?date|fresh)\b",
            r"\b(search|google|bing|look\s*up|query|browse)\b",
            r"\b(external|outside|online|web)\b.*\b(source|reference|link)\b",
            r"\b(news|media|press|report|article)\b",
        ),
    }),
    Tool.YOUTUBE_VIDEO: MappingProxyType({
        "high": _ci(
            r"\b(youtube\.com|youtu\.be)/[\w\-]+",
            r"\bhttps?://(www\.)?(youtube\.com/watch\?v=|youtu\.be/)[\w\-]+",
            r"\b(get|fetch|extract|show)\b.*\b(transcript|subtitles?|captions?)\b.*\b(from|of)\b.*\b(youtube|video)\b",
            r"\b(youtube|video)\b.*\b(transcript|subtitles?|captions?)\b",
            r"\b(summarize|summary|overview)\b.*\b(this|the|that)\b.*\b(youtube|video)\b",
            r"\b(youtube|video)\b.*\b(summary|summarize|overview)\b",
            r"\bwhat\b.*\b(does|did)\b.*\b(video|youtube)\b.*\b(say|cover|discuss|explain|mention)\b",
        ),
        "medium": _ci(
            r"\b(content|key\s*points?|main\s*points?|highlights?)\b.*\b(of|from|in)\b.*\b(video|youtube)\b",
            r"\b(video|youtube)\b.*\b(content|key\s*points?|main\s*points?|highlights?)\b",
            r"\b(explain|describe|tell\s*me\s*about)\b.*\b(this|the|that)\b.*\bvideo\b",
        ),
        "low": _ci(
            r"\b(youtube|video|watch)\b",
            r"\b(transcript|subtitles?|captions?)\b",
        ),
    }),
})

REGEX_TIERS = ("high", "medium", "low")


# ========== EXPLICIT TOOL REQUESTS ==========

EXPLICIT_TOOL_REQUESTS: Mapping[Tool, tuple[re.Pattern, ...]] = MappingProxyType({
    Tool.FILE_SEARCH: _ci(
        r"\b(use|enable|activate|with|using)\b.*\b(file\s*search|document\s*search|rag|retrieval)\b",
        r"\b(file\s*search|document\s*search|rag)\b.*\b(to|for|and)\b",
        r"\bsearch\s+(my|the|these|those)\s+(documents?|files?|pdfs?)\b",
    ),
    Tool.CODE_INTERPRETER: _ci(
        r"\b(use|enable|activate|with|using)\b.*\b(code\s*interpreter|python|execute\s*code|code\s*execution)\b",
        r"\b(code\s*interpreter|python\s*interpreter)\b.*\b(to|for|and)\b",
        r"\b(run|execute)\s+(this|some|the)\s+(code|script|python)\b",
        r"\bwrite\s+(and\s+)?(run|execute)\b.*\b(code|script|python)\b",
    ),
    Tool.ARTIFACTS: _ci(
        r"\b(use|enable|activate|with|using)\b.*\b(artifacts?|components?|react)\b",
        r"\b(create|build|make)\b.*\b(artifact|interactive\s*component)\b",
        r"\b(render|display)\b.*\b(as\s+)?(an?\s+)?(artifact|component)\b",
    ),
    Tool.WEB_SEARCH: _ci(
        r"\b(use|enable|activate|with|using)\b.*\b(web\s*search|internet\s*search|google|bing)\b",
        r"\b(web\s*search|internet\s*search)\b.*\b(to|for|and)\b",
        r"\bsearch\s+(the\s+)?(web|internet|online)\s+(for|about)\b",
    ),
    Tool.YOUTUBE_VIDEO: _ci(
        r"\b(use|enable|activate|with|using)\b.*\b(youtube\s*video|youtube\s*tool|video\s*transcript)\b",
        r"\b(get|fetch|extract)\b.*\b(youtube|video)\b.*\b(transcript|content|info)\b",
        r"\bhttps?://(www\.)?(youtube\.com/watch\?v=|youtu\.be/)[\w\-]+",
        r"\byoutube\.com/watch\?v=",
        r"\byoutu\.be/",
        r"\b(summarize|analyze|explain)\b.*\b(this|the|that)\b.*\b(youtube|video)\b",
    ),
})

# Query talks about the user's own files; suppresses web search when files are attached
DOCUMENT_REFERENCE_PATTERNS = _ci(
    r"\b(in\s+the\s+)?(document|file|pdf|attachment|upload|paper|report|contract|agreement)\b",
    r"\b(the|this|that|these|those|my|our)\s+(document|file|pdf|attachment|upload|paper|report)\b",
    r"\b(uploaded|attached|provided|given|shared)\s+(document|file|pdf|data|information)\b",
    r"\b(according\s+to|based\s+on|from|per)\s+(the\s+)?(document|file|pdf|attachment|report)\b",
    r"\b(in\s+)?(this|that|the)\s+(pdf|doc|file|attachment)\b",
    r"\bthe\s+(attached|uploaded|provided)\b",
)

# Charts can be rendered by either code execution or artifacts
CHART_VISUALIZATION_PATTERNS = _ci(
    r"\b(chart|graph|plot|histogram|heatmap|scatter)\b",
    r"\b(bar\s*chart|pie\s*chart|line\s*chart|line\s*graph|area\s*chart)\b",
    r"\b(visuali[zs]e|visuali[zs]ation)\b",
    r"\b(data|analyze|analysis)\b.*\b(visual|display|show|chart|graph)\b",
)

CLARIFICATION_TOOL_NAMES: Mapping[Tool, str] = MappingProxyType({
    Tool.ARTIFACTS: "UI component",
    Tool.CODE_INTERPRETER: "Python code",
    Tool.WEB_SEARCH: "web search",
    Tool.FILE_SEARCH: "document search",
    Tool.YOUTUBE_VIDEO: "YouTube video",
})

CHART_CLARIFICATION_PROMPT = "How would you like me to visualize this?"
CHART_CLARIFICATION_OPTIONS = (
    "Interactive chart (clickable, zoomable, opens in side panel)",
    "Dashboard view (multiple charts and insights together)",
    "Image chart (appears inline, downloadable)",
)
MULTI_TOOL_CLARIFICATION_PROMPT = (
    "I can help with this using multiple approaches. Which would you prefer?"
)


# ========== COMPLEXITY PATTERNS ==========

CODE_PATTERNS = (
    re.compile(r"```[\s\S]*?```"),
    re.compile(r"`[^`]+`"),
    re.compile(r"\b(function|class|const|let|var|def|import|export|return|if|else|for|while)\b"),
    re.compile(r"\b(async|await|promise|callback|try|catch|throw)\b", re.IGNORECASE),
    re.compile(r"[{}\[\]();].*[{}\[\]();]"),
    re.compile(r"\b(error|exception|bug|debug|fix|issue|crash|undefined|null)\b", re.IGNORECASE),
    re.compile(r"\b(npm|pip|yarn|git|docker|kubernetes|api|sdk|rest|graphql)\b", re.IGNORECASE),
    re.compile(r"\.(js|ts|py|java|cpp|go|rs|rb|php|swift|kt)\b", re.IGNORECASE),
    re.compile(r"\b(console\.log|print|printf|console\.error)\b"),
    re.compile(r"=>|->|\|\||&&|===|!=="),
    re.compile(r"\b(implement|code|program|script|algorithm|refactor)\b", re.IGNORECASE),
    re.compile(r"\b(python|javascript|typescript|java|c\+\+|golang|rust|ruby)\b", re.IGNORECASE),
    re.compile(r"\b(write|create|build|develop)\b.*\b(code|function|class|app|application|program|component)\b", re.IGNORECASE),
    re.compile(r"\b(react|vue|angular|svelte|nextjs|node|express)\b", re.IGNORECASE),
    re.compile(r"\b(useState|useEffect|useRef|useCallback|useMemo|useContext)\b"),
    re.compile(r"\b(component|props|state|render|jsx|tsx)\b", re.IGNORECASE),
)

REASONING_PATTERNS = _ci(
    r"\b(explain|analyze|compare|evaluate|assess|examine|investigate)\b",
    r"\b(why|how does|what if|suppose|consider|imagine)\b",
    r"\b(pros and cons|trade-?offs?|advantages?|disadvantages?|benefits?|drawbacks?)\b",
    r"\b(step by step|break down|walk through|elaborate|detail)\b",
    r"\b(reasoning|logic|argument|evidence|justify|rationale)\b",
    r"\b(implications?|consequences?|impact|effect|result)\b",
    r"\b(difference between|similarities?|contrast|versus|vs\.?)\b",
    r"\b(complex|complicated|intricate|sophisticated)\b",
    r"\b(architecture|design|system|framework)\b",
    r"\b(fix|solve|resolve|diagnose|troubleshoot|debug)\b",
    r"\b(race condition|deadlock|memory leak|bottleneck)\b",
)

EXPERT_PATTERNS = _ci(
    r"\b(comprehensive|thorough|in-?depth|exhaustive|detailed)\b.*\b(research|analysis|review|study|report)\b",
    r"\b(research|investigate|explore)\b.*\b(comprehensive|thorough|all|every)\b",
    r"\bcomprehensive\b",
    r"\bthorough(ly)?\b",
    r"\bin-?depth\b",
    r"\bexhaustive\b",
    r"\b(rag|retrieval|knowledge base|document)\b.*\b(search|query|analysis)\b",
    r"\b(multi-?step|complex)\b.*\b(reasoning|analysis|research)\b",
    r"\b(critical|deep)\b.*\b(analysis|thinking|review)\b",
    r"\b(synthesize|integrate|consolidate)\b.*\b(information|sources|data)\b",
)

MATH_PATTERNS = (
    re.compile(r"\b(calculate|compute|solve|equation|formula|expression)\b", re.IGNORECASE),
    re.compile(r"[+\-*/^=<>≤≥∑∏∫∂∇]"),
    re.compile(r"\b(derivative|integral|probability|statistics|algorithm)\b", re.IGNORECASE),
    re.compile(r"\$[^$]+\$"),
    re.compile(r"\$\$[\s\S]+?\$\$"),
    re.compile(r"\b(matrix|vector|scalar|tensor|eigenvalue)\b", re.IGNORECASE),
    re.compile(r"\b(proof|theorem|lemma|corollary)\b", re.IGNORECASE),
    re.compile(r"\b(\d+\.?\d*)\s*[×x*]\s*(\d+\.?\d*)"),
    re.compile(r"\b(percent|percentage|ratio|proportion|fraction)\b", re.IGNORECASE),
)

CREATIVE_PATTERNS = _ci(
    r"\b(write|create|generate|compose|draft|craft|build|make|design)\b",
    r"\b(story|poem|essay|article|blog|script|novel|narrative)\b",
    r"\b(creative|imaginative|original|unique|innovative)\b",
    r"\b(tone|style|voice|mood|atmosphere)\b",
    r"\b(character|plot|setting|dialogue|scene)\b",
    r"\b(metaphor|simile|imagery|symbolism)\b",
)

UI_GENERATION_PATTERNS = _ci(
    r"\b(dashboard|ui|interface|component|widget|page|app|application)\b",
    r"\b(react|vue|angular|svelte|html|css|frontend|front-?end)\b",
    r"\b(chart|graph|visualization|table|grid|layout|form)\b",
    r"\b(button|input|modal|dropdown|menu|navbar|sidebar|card)\b",
    r"\b(artifact|interactive|render|display|show)\b",
)

SIMPLE_PATTERNS = _ci(
    r"^(hi|hello|hey|thanks|thank you|ok|okay|yes|no|sure|got it|bye|goodbye)\s*[.!?]?\s*$",
    r"^(what is|define|meaning of|what's)\s+\w+\s*\??$",
    r"^(how are you|what's up|how's it going)\s*\??$",
    r"^(tell me a joke|say something funny)\s*$",
    r"^(good morning|good evening|good night)\s*[.!]?\s*$",
)

TECHNICAL_DOMAIN_PATTERNS = _ci(
    r"\b(API|SDK|REST|GraphQL|OAuth|JWT|WebSocket|HTTP)\b",
    r"\b(Kubernetes|Docker|AWS|Azure|GCP|Terraform|Ansible)\b",
    r"\b(neural|transformer|embedding|vector|tensor|gradient)\b",
    r"\b(quantum|molecular|genomic|clinical|pharmaceutical)\b",
    r"\b(microservices?|serverless|cloud-?native|devops|cicd)\b",
    r"\b(blockchain|cryptocurrency|smart contract|defi|nft)\b",
    r"\b(machine learning|deep learning|nlp|computer vision|llm)\b",
)

MULTI_STEP_PATTERNS = (
    re.compile(r"\b(first|then|next|after that|finally|step \d+)\b", re.IGNORECASE),
    re.compile(r"\b(also|additionally|furthermore|moreover)\b", re.IGNORECASE),
    re.compile(r"\d+\.\s+.*\n\d+\.\s+"),
    re.compile(r"[-*]\s+.*\n[-*]\s+"),
    re.compile(r"\band\b.*\band\b.*\band\b", re.IGNORECASE),
)

# Keyword categories; two or more hits mark expert-level engineering work
EXPERT_COMPLEXITY_PATTERNS = _ci(
    r"\b(architect|design system|scalab|distributed|microservices?)\b",
    r"\b(algorithm|complexity|big-?o|optimization|performance)\b",
    r"\b(security|authentication|authorization|encryption|vulnerability)\b",
    r"\b(machine learning|neural|training|model|inference)\b",
    r"\b(concurrent|parallel|async|threading|race condition)\b",
    r"\b(database design|schema|migration|query optimization)\b",
    r"\b(refactor|redesign|rewrite|overhaul)\b.*\b(entire|whole|complete|full)\b",
    r"\b(implement|build|create)\b.*\b(from scratch|complete|full)\b",
)

# Phrases where the user explicitly asks for deep analysis
DEEP_ANALYSIS_PATTERNS = _ci(
    r"\b(comprehensive|thorough|exhaustive|in-?depth)\s+(research|analysis|review|study|report|investigation)\b",
    r"\b(research|analyze|review|investigate)\s+(comprehensively|thoroughly|exhaustively|in-?depth)\b",
    r"\bdeep\s*(dive|analysis|research|investigation)\b",
    r"\bdig\s*(deep|deeper)\s*(into)?\b",
    r"\b(detailed|complete|full)\s+(analysis|breakdown|examination|assessment|investigation)\b",
    r"\b(debug|troubleshoot|diagnose)\s+(this|the|my)\s+(code|error|issue|problem|bug)\b",
    r"\b(fix|solve|resolve)\s+(this|the|my)\s+(bug|error|issue|crash)\b",
    r"\b(design|architect)\s+(a|the|an)\s+(system|architecture|solution)\b",
    r"\bsystem\s+architecture\b",
)


# ========== ASSISTANT-TEXT DETECTION ==========

TOOL_DETECTION_PATTERNS: Mapping[Tool, tuple[re.Pattern, ...]] = MappingProxyType({
    Tool.WEB_SEARCH: _ci(
        r"searching the web",
        r"search results?",
        r"found (these|the following) results",
        r"according to.*search",
        r"from.*web.*search",
    ),
    Tool.CODE_INTERPRETER: _ci(
        r"running code",
        r"executing.*code",
        r"code.*output",
        r"analyzed the data",
        r"created.*chart",
        r"generated.*plot",
        r"\bpython\s+output\b",
        r"analysis.*results?",
    ),
    Tool.FILE_SEARCH: _ci(
        r"searching.*document",
        r"from the (document|file|pdf)",
        r"according to the (document|file|pdf)",
        r"the document (says|mentions|states)",
        r"found in the (document|file)",
    ),
    Tool.ARTIFACTS: _ci(
        r"created.*component",
        r"here's the (dashboard|component|ui|form|interface)",
        r"generated.*artifact",
        r"built.*interface",
        r"created.*mermaid",
    ),
    Tool.YOUTUBE_VIDEO: _ci(
        r"(video|youtube) transcript",
        r"transcript of the (video|youtube)",
        r"\bin (the|this) (youtube )?video\b",
        r"the video (says|covers|discusses|explains|mentions)",
    ),
})

# Checked in enum order; the first output type that matches wins
OUTPUT_DETECTION_PATTERNS: Mapping[OutputType, tuple[re.Pattern, ...]] = MappingProxyType({
    OutputType.CHART: _ci(r"chart|graph|plot|visualization|figure"),
    OutputType.CODE: (
        re.compile(r"code|function|script|program", re.IGNORECASE),
        re.compile(r"```\w+"),
    ),
    OutputType.DOCUMENT: _ci(r"document|file|pdf|report"),
    OutputType.UI_COMPONENT: _ci(r"component|dashboard|interface|form"),
    OutputType.SEARCH_RESULT: _ci(r"search result|found|according to"),
})


# ========== ESCALATION GATE SHAPES ==========

GREETING_PATTERN = re.compile(
    r"^(hi|hello|hey|thanks|thank you|ok|okay|bye|goodbye|yes|no|sure|yep|nope|cool|nice|"
    r"great|awesome|perfect|got it|alright|sounds good|understood|noted|right|exactly|indeed|"
    r"absolutely|definitely|certainly|of course|for sure|makes sense|i see|ah|oh|wow|"
    r"interesting|good|fine|neat)[\s!?.]*$",
    re.IGNORECASE,
)

NEW_TOPIC_PATTERN = re.compile(
    r"^(now|next|let'?s|can you|could you|please|i want|i need|i'?d like|how (do|can|to)|"
    r"what (is|are|about)|tell me about|explain|show me|help me with|switch to|change to|"
    r"forget|never ?mind|start|begin)",
    re.IGNORECASE,
)

FOLLOW_UP_START_PATTERN = re.compile(
    r"^(and|also|what about|how about|same for|do the same|continue|more|another|again|else|"
    r"other|too|as well|plus|additionally|furthermore|give me|show me more|tell me more|"
    r"any more|anything else)",
    re.IGNORECASE,
)

PRONOUN_START_PATTERN = re.compile(
    r"^(it|this|that|these|those|the same|for this|for that|about this|about that)\b",
    re.IGNORECASE,
)

SELECTION_PATTERNS = _ci(
    r"^[1-9a-e]\.?$",
    r"^(first|second|third|option\s*[1-9a-e]|choice\s*[1-9a-e])$",
)

CONTEXTUAL_PRONOUN_PATTERN = re.compile(r"\b(it|this|that|these|those|them)\b", re.IGNORECASE)
OVERRIDE_KEYWORD_PATTERN = re.compile(
    r"\b(same|again|continue|another|more|change|modify|update|fix)\b", re.IGNORECASE
)

# Queries up to this many characters count as follow-ups unless they open a new topic
SHORT_FOLLOW_UP_LENGTH = 30
# Queries up to this many characters need history to be understood
CONTEXT_DEPENDENT_LENGTH = 5


# ========== CLASSIFIER ==========

CLASSIFIER_TOOL_ALIASES: Mapping[str, Tool] = MappingProxyType({
    "web_search": Tool.WEB_SEARCH,
    "websearch": Tool.WEB_SEARCH,
    "search": Tool.WEB_SEARCH,
    "execute_code": Tool.CODE_INTERPRETER,
    "code_interpreter": Tool.CODE_INTERPRETER,
    "code": Tool.CODE_INTERPRETER,
    "file_search": Tool.FILE_SEARCH,
    "filesearch": Tool.FILE_SEARCH,
    "rag": Tool.FILE_SEARCH,
    "artifacts": Tool.ARTIFACTS,
    "artifact": Tool.ARTIFACTS,
    "ui": Tool.ARTIFACTS,
    "youtube_video": Tool.YOUTUBE_VIDEO,
    "youtube": Tool.YOUTUBE_VIDEO,
    "video": Tool.YOUTUBE_VIDEO,
})

CLASSIFIER_TIER_SCORES: Mapping[ModelTier, float] = MappingProxyType({
    ModelTier.SIMPLE: 0.25,
    ModelTier.MODERATE: 0.5,
    ModelTier.COMPLEX: 0.7,
    ModelTier.EXPERT: 0.9,
})
