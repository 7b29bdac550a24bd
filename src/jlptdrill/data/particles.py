"""Particle definitions and practice sentences, grouped by JLPT level.

Particles are listed from most to least fundamental within each level; the
beginner tier only draws from the head of each list.
"""
from typing import Dict, List

from jlptdrill.models.content_models import ParticleDefinition, ParticleExample


def _example(sentence, english, correct, options, explanation, level="N5", difficulty="beginner", category="general"):
    return ParticleExample(
        sentence=sentence,
        english=english,
        correct=correct,
        options=options,
        explanation=explanation,
        jlpt_level=level,
        difficulty=difficulty,
        category=category,
    )


N5_PARTICLES: List[ParticleDefinition] = [
    ParticleDefinition(
        particle="は",
        reading="wa",
        function="topic marker",
        description="Marks what the sentence is about",
        examples=[
            _example("私＿学生です", "I am a student", "は", ["は", "が", "を"],
                     "私 is the topic being discussed", category="topic"),
            _example("今日＿天気がいいです", "Today's weather is good", "は", ["は", "が", "の"],
                     "今日 is the topic of the sentence", category="topic"),
            _example("日本語＿難しいです", "Japanese is difficult", "は", ["は", "が", "を"],
                     "日本語 is what we're talking about", category="topic"),
        ],
    ),
    ParticleDefinition(
        particle="が",
        reading="ga",
        function="subject marker",
        description="Marks the grammatical subject, often for emphasis or new information",
        examples=[
            _example("犬＿好きです", "I like dogs", "が", ["が", "は", "を"],
                     "犬 is the object being liked (grammatical subject of 好き)", category="subject"),
            _example("雨＿降っています", "It's raining", "が", ["が", "は", "に"],
                     "雨 is the subject performing the action", category="subject"),
            _example("誰＿来ましたか", "Who came?", "が", ["が", "は", "を"],
                     "Question words typically use が", difficulty="intermediate", category="subject"),
        ],
    ),
    ParticleDefinition(
        particle="を",
        reading="wo/o",
        function="direct object marker",
        description="Marks what receives the action of the verb",
        examples=[
            _example("本＿読みます", "I read a book", "を", ["を", "が", "に"],
                     "本 is what is being read (direct object)", category="object"),
            _example("映画＿見ました", "I watched a movie", "を", ["を", "が", "で"],
                     "映画 is what was watched (direct object)", category="object"),
            _example("公園＿散歩します", "I take a walk through the park", "を", ["を", "で", "に"],
                     "を marks the space moved through", difficulty="intermediate", category="movement"),
        ],
    ),
    ParticleDefinition(
        particle="に",
        reading="ni",
        function="direction/time/indirect object marker",
        description="Shows direction, specific time, or recipient of an action",
        examples=[
            _example("学校＿行きます", "I go to school", "に", ["に", "で", "を"],
                     "学校 is the destination", category="direction"),
            _example("友達＿手紙を書きます", "I write a letter to my friend", "に", ["に", "が", "を"],
                     "友達 is the recipient of the letter", difficulty="intermediate", category="recipient"),
            _example("七時＿起きます", "I wake up at 7 o'clock", "に", ["に", "で", "から"],
                     "七時 is a specific point in time", category="time"),
        ],
    ),
    ParticleDefinition(
        particle="で",
        reading="de",
        function="location of action/method marker",
        description="Shows where an action takes place or the means used",
        examples=[
            _example("図書館＿勉強します", "I study at the library", "で", ["で", "に", "を"],
                     "図書館 is where the studying takes place", category="location"),
            _example("電車＿行きます", "I go by train", "で", ["で", "に", "が"],
                     "電車 is the means of transportation", category="means"),
            _example("日本語＿話します", "I speak in Japanese", "で", ["で", "を", "に"],
                     "日本語 is the language used", difficulty="intermediate", category="means"),
        ],
    ),
    ParticleDefinition(
        particle="から",
        reading="kara",
        function="starting point marker",
        description="Shows the starting point in time or space, or a source",
        examples=[
            _example("家＿出ます", "I leave from home", "から", ["から", "に", "で"],
                     "家 is the starting point of the action", category="direction"),
            _example("九時＿始まります", "It starts from 9 o'clock", "から", ["から", "に", "まで"],
                     "九時 is the starting time", category="time"),
        ],
    ),
    ParticleDefinition(
        particle="まで",
        reading="made",
        function="ending point marker",
        description="Shows the ending point in time or space (until/to)",
        examples=[
            _example("駅＿歩きます", "I walk to the station", "まで", ["まで", "に", "で"],
                     "駅 is the end point of the walk", category="direction"),
            _example("五時＿働きます", "I work until 5 o'clock", "まで", ["まで", "に", "から"],
                     "五時 is the ending time of working", category="time"),
        ],
    ),
    ParticleDefinition(
        particle="と",
        reading="to",
        function="conjunction/accompaniment marker",
        description="Connects nouns ('and') or shows accompaniment ('with')",
        examples=[
            _example("友達＿映画を見ます", "I watch a movie with my friend", "と", ["と", "に", "が"],
                     "友達 is who you're with", category="accompaniment"),
            _example("パン＿牛乳を買います", "I buy bread and milk", "と", ["と", "を", "に"],
                     "と connects two items being bought together", category="listing"),
        ],
    ),
    ParticleDefinition(
        particle="の",
        reading="no",
        function="possessive/modifier marker",
        description="Links two nouns, showing possession or description",
        examples=[
            _example("私＿本です", "It's my book", "の", ["の", "は", "が"],
                     "の shows that the book belongs to 私", category="possession"),
            _example("日本語＿先生", "Japanese teacher", "の", ["の", "と", "に"],
                     "日本語 describes what kind of teacher", category="modifier"),
        ],
    ),
    ParticleDefinition(
        particle="へ",
        reading="e",
        function="direction marker",
        description="Shows the direction of movement",
        examples=[
            _example("東京＿行きます", "I go towards Tokyo", "へ", ["へ", "で", "を"],
                     "へ emphasizes the direction of travel", category="direction"),
            _example("母＿の手紙", "A letter to my mother", "へ", ["へ", "で", "が"],
                     "へ can mark who something is directed at", difficulty="advanced", category="recipient"),
        ],
    ),
    ParticleDefinition(
        particle="も",
        reading="mo",
        function="inclusion marker",
        description="Means 'also' or 'too', replacing は, が or を",
        examples=[
            _example("私＿学生です", "I am a student too", "も", ["も", "は", "が"],
                     "も adds 私 to something already said", category="inclusion"),
            _example("猫＿好きです", "I like cats too", "も", ["も", "を", "で"],
                     "も replaces が to mean 'cats as well'", category="inclusion"),
        ],
    ),
]


N4_PARTICLES: List[ParticleDefinition] = [
    ParticleDefinition(
        particle="より",
        reading="yori",
        function="comparison marker",
        description="Marks the standard of comparison ('than')",
        examples=[
            _example("電車はバス＿速いです", "Trains are faster than buses", "より", ["より", "から", "まで"],
                     "バス is the standard being compared against", level="N4", category="comparison"),
            _example("去年＿暑いです", "It's hotter than last year", "より", ["より", "まで", "で"],
                     "去年 is what this year is compared to", level="N4", category="comparison"),
        ],
    ),
    ParticleDefinition(
        particle="しか",
        reading="shika",
        function="limiting marker",
        description="Means 'only' and always takes a negative verb",
        examples=[
            _example("百円＿ありません", "I only have 100 yen", "しか", ["しか", "だけ", "も"],
                     "しか pairs with the negative ありません", level="N4", category="limit"),
            _example("一人＿来なかった", "Only one person came", "しか", ["しか", "だけ", "が"],
                     "しか with a negative verb stresses how few", level="N4",
                     difficulty="intermediate", category="limit"),
        ],
    ),
    ParticleDefinition(
        particle="だけ",
        reading="dake",
        function="limiting marker",
        description="Means 'only' or 'just' with a neutral nuance",
        examples=[
            _example("水＿飲みます", "I only drink water", "だけ", ["だけ", "しか", "も"],
                     "だけ limits the drink to water, verb stays affirmative", level="N4", category="limit"),
            _example("少し＿食べました", "I ate just a little", "だけ", ["だけ", "しか", "まで"],
                     "だけ limits the amount", level="N4", category="limit"),
        ],
    ),
    ParticleDefinition(
        particle="ので",
        reading="node",
        function="reason marker",
        description="Gives an objective reason ('because', 'so')",
        examples=[
            _example("雨が降っている＿、出かけません", "It's raining, so I won't go out", "ので",
                     ["ので", "のに", "から"], "ので gives the reason for not going out",
                     level="N4", difficulty="intermediate", category="reason"),
            _example("静かな＿、よく眠れます", "It's quiet, so I can sleep well", "ので",
                     ["ので", "のに", "より"], "な + ので follows a na-adjective",
                     level="N4", difficulty="advanced", category="reason"),
        ],
    ),
    ParticleDefinition(
        particle="のに",
        reading="noni",
        function="contrast marker",
        description="Expresses an unexpected result ('even though')",
        examples=[
            _example("勉強した＿、合格しませんでした", "Even though I studied, I didn't pass", "のに",
                     ["のに", "ので", "から"], "のに contrasts the effort with the result",
                     level="N4", difficulty="intermediate", category="contrast"),
            _example("日曜日な＿、仕事があります", "Even though it's Sunday, I have work", "のに",
                     ["のに", "ので", "だけ"], "な + のに follows a noun",
                     level="N4", difficulty="advanced", category="contrast"),
        ],
    ),
]

PARTICLES_BY_LEVEL: Dict[str, List[ParticleDefinition]] = {
    "N5": N5_PARTICLES,
    "N4": N4_PARTICLES,
}
