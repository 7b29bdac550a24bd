"""JLPT vocabulary sets, grouped by level."""
from typing import Dict, List

from jlptdrill.models.content_models import VocabularyItem

N5_VOCABULARY: List[VocabularyItem] = [
    VocabularyItem("姉", "あね", "older sister", "noun"),
    VocabularyItem("兄", "あに", "older brother", "noun"),
    VocabularyItem("父", "ちち", "father", "noun"),
    VocabularyItem("母", "はは", "mother", "noun"),
    VocabularyItem("子供", "こども", "child", "noun"),
    VocabularyItem("大人", "おとな", "adult", "noun"),
    VocabularyItem("男", "おとこ", "man", "noun"),
    VocabularyItem("女", "おんな", "woman", "noun"),
    VocabularyItem("弟", "おとうと", "younger brother", "noun"),
    VocabularyItem("妹", "いもうと", "younger sister", "noun"),
    VocabularyItem("お母さん", "おかあさん", "mother", "noun"),
    VocabularyItem("お父さん", "おとうさん", "father", "noun"),
    VocabularyItem("行く", "いく", "to go", "verb"),
    VocabularyItem("来る", "くる", "to come", "verb"),
    VocabularyItem("帰る", "かえる", "to return", "verb"),
    VocabularyItem("食べる", "たべる", "to eat", "verb"),
    VocabularyItem("飲む", "のむ", "to drink", "verb"),
    VocabularyItem("見る", "みる", "to see", "verb"),
    VocabularyItem("聞く", "きく", "to listen", "verb"),
    VocabularyItem("読む", "よむ", "to read", "verb"),
    VocabularyItem("書く", "かく", "to write", "verb"),
    VocabularyItem("話す", "はなす", "to speak", "verb"),
    VocabularyItem("寝る", "ねる", "to sleep", "verb"),
    VocabularyItem("起きる", "おきる", "to wake up", "verb"),
    VocabularyItem("新しい", "あたらしい", "new", "i-adjective"),
    VocabularyItem("古い", "ふるい", "old", "i-adjective"),
    VocabularyItem("大きい", "おおきい", "big", "i-adjective"),
    VocabularyItem("小さい", "ちいさい", "small", "i-adjective"),
    VocabularyItem("高い", "たかい", "expensive/tall", "i-adjective"),
    VocabularyItem("安い", "やすい", "cheap", "i-adjective"),
    VocabularyItem("いい", "いい", "good", "i-adjective"),
    VocabularyItem("悪い", "わるい", "bad", "i-adjective"),
    VocabularyItem("美味しい", "おいしい", "delicious", "i-adjective"),
    VocabularyItem("暑い", "あつい", "hot", "i-adjective"),
    VocabularyItem("寒い", "さむい", "cold", "i-adjective"),
    VocabularyItem("暖かい", "あたたかい", "warm", "i-adjective"),
    VocabularyItem("有名", "ゆうめい", "famous", "na-adjective"),
    VocabularyItem("便利", "べんり", "convenient", "na-adjective"),
    VocabularyItem("綺麗", "きれい", "beautiful/clean", "na-adjective"),
    VocabularyItem("静か", "しずか", "quiet", "na-adjective"),
    VocabularyItem("親切", "しんせつ", "kind", "na-adjective"),
    VocabularyItem("簡単", "かんたん", "simple", "na-adjective"),
    VocabularyItem("大変", "たいへん", "tough/hard", "na-adjective"),
    VocabularyItem("大丈夫", "だいじょうぶ", "OK/alright", "na-adjective"),
    VocabularyItem("安全", "あんぜん", "safe", "na-adjective"),
    VocabularyItem("危険", "きけん", "dangerous", "na-adjective"),
    VocabularyItem("大切", "たいせつ", "important", "na-adjective"),
    VocabularyItem("特別", "とくべつ", "special", "na-adjective"),
]

N4_VOCABULARY: List[VocabularyItem] = [
    VocabularyItem("会議", "かいぎ", "meeting", "noun"),
    VocabularyItem("経験", "けいけん", "experience", "noun"),
    VocabularyItem("趣味", "しゅみ", "hobby", "noun"),
    VocabularyItem("景色", "けしき", "scenery", "noun"),
    VocabularyItem("届ける", "とどける", "to deliver", "verb"),
    VocabularyItem("集める", "あつめる", "to collect", "verb"),
    VocabularyItem("比べる", "くらべる", "to compare", "verb"),
    VocabularyItem("謝る", "あやまる", "to apologize", "verb"),
    VocabularyItem("珍しい", "めずらしい", "rare", "i-adjective"),
    VocabularyItem("恥ずかしい", "はずかしい", "embarrassing", "i-adjective"),
    VocabularyItem("厳しい", "きびしい", "strict", "i-adjective"),
    VocabularyItem("優しい", "やさしい", "gentle", "i-adjective"),
    VocabularyItem("丁寧", "ていねい", "polite", "na-adjective"),
    VocabularyItem("残念", "ざんねん", "regrettable", "na-adjective"),
    VocabularyItem("自由", "じゆう", "free", "na-adjective"),
    VocabularyItem("必要", "ひつよう", "necessary", "na-adjective"),
]

VOCABULARY_BY_LEVEL: Dict[str, List[VocabularyItem]] = {
    "N5": N5_VOCABULARY,
    "N4": N4_VOCABULARY,
}

CATEGORIES = ["noun", "verb", "i-adjective", "na-adjective"]
