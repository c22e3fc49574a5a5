"""
テスト用の読み上げ文章データ
難易度1〜5を10文ずつ、易しい順に並べる
"""
from typing import Tuple

from speaklevel.models.schemas import Sentence


_SENTENCE_TEXTS: Tuple[Tuple[int, str], ...] = (
    # 難易度1: 短い日常表現
    (1, "Hello, my name is Alex."),
    (1, "I like to drink coffee in the morning."),
    (1, "The cat is sleeping on the sofa."),
    (1, "Where is the nearest bus stop?"),
    (1, "It is very cold today."),
    (1, "My brother plays soccer after school."),
    (1, "Can I have a glass of water, please?"),
    (1, "We are going to the park this weekend."),
    (1, "She has two sisters and one brother."),
    (1, "Thank you very much for your help."),
    # 難易度2: 基本的な複文
    (2, "I usually take the subway because it is faster than driving."),
    (2, "Could you tell me how to get to the train station?"),
    (2, "Last summer, we traveled to the beach with our friends."),
    (2, "If it rains tomorrow, the picnic will be canceled."),
    (2, "He has been learning English for about three years."),
    (2, "The restaurant on the corner serves delicious noodles."),
    (2, "I forgot my umbrella, so I got completely wet."),
    (2, "Please turn off the lights when you leave the room."),
    (2, "My favorite season is autumn because the weather is nice."),
    (2, "They decided to stay home and watch a movie instead."),
    # 難易度3: 意見・説明
    (3, "Although the project was difficult, our team finished it on time."),
    (3, "I would rather work from home than commute for two hours every day."),
    (3, "The museum was so crowded that we could hardly see the paintings."),
    (3, "She suggested that we should book the tickets in advance."),
    (3, "Regular exercise can significantly improve both your mood and your health."),
    (3, "It took me a while to get used to the local customs."),
    (3, "The manager asked whether anyone had any questions about the schedule."),
    (3, "Having finished his homework, he went out to meet his friends."),
    (3, "Most people agree that reading helps to expand your vocabulary."),
    (3, "If I had known about the traffic, I would have left earlier."),
    # 難易度4: 抽象的な内容
    (4, "The rapid development of technology has fundamentally changed the way we communicate."),
    (4, "Despite numerous setbacks, the researchers remained optimistic about their findings."),
    (4, "Environmental policies must balance economic growth with long-term sustainability."),
    (4, "It is widely believed that early education plays a crucial role in later success."),
    (4, "The committee postponed its decision until further evidence could be gathered."),
    (4, "Not only did she win the competition, but she also broke the national record."),
    (4, "Public transportation systems in large cities are often overwhelmed during rush hour."),
    (4, "The author's latest novel explores the complex relationship between memory and identity."),
    (4, "Effective leaders are able to articulate a clear vision and inspire others to follow it."),
    (4, "Had the negotiations failed, the consequences for both companies would have been severe."),
    # 難易度5: 高度な語彙と構文
    (5, "The unprecedented proliferation of misinformation poses a formidable challenge to democratic institutions."),
    (5, "Notwithstanding the considerable expenditure, the initiative yielded remarkably few tangible benefits."),
    (5, "Her meticulous analysis elucidated the subtle inconsistencies in the prevailing theoretical framework."),
    (5, "The phenomenon is attributable to a confluence of socioeconomic, cultural, and demographic factors."),
    (5, "Were the government to implement such measures, it would inevitably provoke widespread resentment."),
    (5, "The archaeological discoveries substantially corroborate the hypothesis regarding ancient trade routes."),
    (5, "His eloquent yet ambiguous remarks were subject to a multitude of conflicting interpretations."),
    (5, "Contemporary architecture increasingly reconciles aesthetic ambition with stringent environmental constraints."),
    (5, "The pharmaceutical company was scrutinized for its allegedly inadequate disclosure of clinical data."),
    (5, "Ultimately, the efficacy of any reform hinges upon the willingness of stakeholders to compromise."),
)

# 読み上げ文章リスト（順序は固定）
TEST_SENTENCES: Tuple[Sentence, ...] = tuple(
    Sentence(id=index + 1, text=text, difficulty=difficulty)
    for index, (difficulty, text) in enumerate(_SENTENCE_TEXTS)
)
