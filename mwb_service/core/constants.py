"""Page template constants for the weekly meeting workbook."""

BASE_URL = "https://wol.jw.org"

ARTICLE_CSS_SELECTOR = "#article"
WEEK_DATE_SPAN_CSS_SELECTOR = "#p1"
WEEKLY_BIBLE_READ_ANCHORS_CSS_SELECTOR = "#p2 a"
INTRODUCTION_CSS_SELECTOR = "#p3"
TREASURES_TALK_CSS_SELECTOR = "#tt8"
LINE_WITH_TIME_BOX_CSS_SELECTOR = ".du-color--textSubdued"
LINE_WITH_SECTION_NUMBER_CSS_SELECTOR = ":scope > h3"
TALK_POINTS_CSS_SELECTOR = ":scope > div > p"
OPEN_ENDED_QUESTION_CSS_SELECTOR = "li.du-margin-top--8 p"
SCRIPTURE_ANCHOR_CSS_SELECTOR = "a.b"

STARTING_SONG_CSS_SELECTOR = ".bodyTxt > #p3"
MIDDLE_SONG_CSS_SELECTOR = ".bodyTxt > .dc-icon--music:not(:first-child):not(:last-child)"
FINAL_SONG_CSS_SELECTOR = ".bodyTxt > h3:last-child"

FIELD_MINISTRY_HEADLINE_CSS_SELECTOR = ".dc-icon--wheat"
CHRISTIAN_LIVING_HEADLINE_CSS_SELECTOR = ".dc-icon--sheep"

PUB_CODE_WATCHTOWER = "pub-w"
PUB_CODE_BIBLE = "pub-nwtsty"
PUB_CODE_SONGBOOK = "pub-sjj"

LANDING_LANGUAGE_LINK_CSS_SELECTOR = 'link[hreflang="{language}"]'
TODAY_NAV_CSS_SELECTOR = "#menuToday .todayNav"
WATCHTOWER_ITEM_CSS_SELECTOR = ".todayItem.pub-w:nth-child(2) .itemData a"

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:126.0) Gecko/20100101 Firefox/126.0"
)
