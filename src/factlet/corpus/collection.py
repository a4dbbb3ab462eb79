"""The static factlet corpus.

Eight categories with eight factlets each. Within a category the entries
run from easiest to hardest: three at level 1, three at level 2, two at
level 3.
"""

from __future__ import annotations

import random

from .models import Category, Factlet, Level

_L1, _L2, _L3 = Level.LEVEL_1, Level.LEVEL_2, Level.LEVEL_3

_RAW: tuple[tuple[Category, Level, str], ...] = (
    # Science
    (Category.SCIENCE, _L1, "Honey never spoils. Archaeologists have found 3,000-year-old honey in Egyptian tombs that was still perfectly edible."),
    (Category.SCIENCE, _L1, "Bananas are berries, but strawberries are not. Botanically, berries are fruits produced from a single ovary."),
    (Category.SCIENCE, _L1, "Lightning strikes the Earth about 8 million times per day, or roughly 100 times per second."),
    (Category.SCIENCE, _L2, "A day on Venus is longer than its year. Venus takes 243 Earth days to rotate once, but only 225 Earth days to orbit the Sun."),
    (Category.SCIENCE, _L2, "Octopuses have three hearts and blue blood. Two hearts pump blood to the gills, while the third pumps it to the rest of the body."),
    (Category.SCIENCE, _L2, "Your body contains about 37.2 trillion cells, and you lose about 200 billion cells every day."),
    (Category.SCIENCE, _L3, "Water can boil and freeze at the same time. This phenomenon, called the triple point, occurs at a specific temperature and pressure."),
    (Category.SCIENCE, _L3, "A teaspoon of neutron star would weigh about 6 billion tons."),
    # History
    (Category.HISTORY, _L1, "The Eiffel Tower was originally intended to be a temporary structure, built for the 1889 World's Fair."),
    (Category.HISTORY, _L1, "Vikings never wore horned helmets. This is a 19th-century myth popularized by costume designers."),
    (Category.HISTORY, _L1, "The shortest war in history lasted 38 to 45 minutes between Britain and Zanzibar on August 27, 1896."),
    (Category.HISTORY, _L2, "Cleopatra lived closer in time to the Moon landing than to the construction of the Great Pyramid."),
    (Category.HISTORY, _L2, "Ancient Romans used crushed mouse brains as toothpaste."),
    (Category.HISTORY, _L2, "The first computer programmer was Ada Lovelace, who wrote algorithms for Charles Babbage's Analytical Engine in the 1840s."),
    (Category.HISTORY, _L3, "Oxford University is older than the Aztec Empire. Teaching began in Oxford in 1096, while the Aztec Empire was founded in 1428."),
    (Category.HISTORY, _L3, "Woolly mammoths were still alive when the Great Pyramid of Giza was being built, around 2660 BCE."),
    # Nature
    (Category.NATURE, _L1, "A group of flamingos is called a flamboyance."),
    (Category.NATURE, _L1, "Cows have best friends and experience stress when separated from them."),
    (Category.NATURE, _L1, "A jellyfish is 95% water. If washed ashore, it would nearly disappear as the water evaporates."),
    (Category.NATURE, _L2, "Sloths can hold their breath longer than dolphins, up to 40 minutes, by slowing their heart rate."),
    (Category.NATURE, _L2, "A single cloud can weigh more than 1 million pounds, but floats because the air beneath it is even heavier."),
    (Category.NATURE, _L2, "The Amazon rainforest produces about 20% of the world's oxygen."),
    (Category.NATURE, _L3, "Trees can communicate with each other through an underground network of fungi, sometimes called the 'Wood Wide Web.'"),
    (Category.NATURE, _L3, "The oldest known living tree is a bristlecone pine named Methuselah, which is over 4,850 years old."),
    # Language
    (Category.LANGUAGE, _L1, "The dot over the letters 'i' and 'j' is called a tittle."),
    (Category.LANGUAGE, _L1, "The sentence 'The quick brown fox jumps over the lazy dog' uses every letter of the alphabet."),
    (Category.LANGUAGE, _L1, "The shortest complete sentence in English is 'I am.'"),
    (Category.LANGUAGE, _L2, "'Dreamt' is the only common English word that ends with the letters 'mt.'"),
    (Category.LANGUAGE, _L2, "'Bookkeeper' is the only English word with three consecutive double letters."),
    (Category.LANGUAGE, _L2, "A 'jiffy' is an actual unit of time: 1/100th of a second."),
    (Category.LANGUAGE, _L3, "The word 'set' has more dictionary definitions than any other English word, with over 400 senses."),
    (Category.LANGUAGE, _L3, "Papua New Guinea has over 800 living languages, more than any other country."),
    # Culture
    (Category.CULTURE, _L1, "Japan has more than 50,000 people who are over 100 years old."),
    (Category.CULTURE, _L1, "The world's most-played board game, chess, originated in India around the 6th century."),
    (Category.CULTURE, _L1, "The Olympic rings represent the five inhabited continents that took part in the Games."),
    (Category.CULTURE, _L2, "There are more possible iterations of a game of chess than there are atoms in the observable universe."),
    (Category.CULTURE, _L2, "The Mona Lisa has no visible eyebrows or eyelashes."),
    (Category.CULTURE, _L2, "Bollywood produces more films each year than Hollywood."),
    (Category.CULTURE, _L3, "The oldest known song, the Hurrian Hymn No. 6, was written on clay tablets about 3,400 years ago."),
    (Category.CULTURE, _L3, "In Bhutan, national policy is guided by Gross National Happiness rather than GDP alone."),
    # Human Body
    (Category.HUMAN_BODY, _L1, "Fingernails grow nearly 4 times faster than toenails."),
    (Category.HUMAN_BODY, _L1, "You are taller in the morning than in the evening due to spinal compression throughout the day."),
    (Category.HUMAN_BODY, _L1, "Your nose can remember 50,000 different scents."),
    (Category.HUMAN_BODY, _L2, "The human eye can distinguish about 10 million different colors."),
    (Category.HUMAN_BODY, _L2, "The human brain uses about 20% of the body's total energy, despite being only 2% of its weight."),
    (Category.HUMAN_BODY, _L2, "Your stomach gets a new lining every 3-4 days to prevent it from digesting itself."),
    (Category.HUMAN_BODY, _L3, "Humans share about 60% of their genes with bananas."),
    (Category.HUMAN_BODY, _L3, "The strongest muscle in the human body, relative to its size, is the masseter (jaw muscle)."),
    # Geography
    (Category.GEOGRAPHY, _L1, "Antarctica is the only continent without a time zone of its own."),
    (Category.GEOGRAPHY, _L1, "The Pacific Ocean is larger than all the land on Earth combined."),
    (Category.GEOGRAPHY, _L1, "There is a town in Norway called Hell, and it freezes over every winter."),
    (Category.GEOGRAPHY, _L2, "Russia has 11 time zones, more than any other country."),
    (Category.GEOGRAPHY, _L2, "Canada has more lakes than the rest of the world combined."),
    (Category.GEOGRAPHY, _L2, "The Dead Sea is so salty that fish cannot live in it, and you float effortlessly on its surface."),
    (Category.GEOGRAPHY, _L3, "Mount Everest grows about 4 millimeters every year due to tectonic activity."),
    (Category.GEOGRAPHY, _L3, "The Sahara Desert has expanded by roughly 10% since 1920."),
    # Technology
    (Category.TECHNOLOGY, _L1, "The first computer mouse was made of wood."),
    (Category.TECHNOLOGY, _L1, "The first ever website is still online at info.cern.ch."),
    (Category.TECHNOLOGY, _L1, "More people in the world have access to mobile phones than to toilets."),
    (Category.TECHNOLOGY, _L2, "Email is older than the World Wide Web. The first email was sent in 1971, while the web was invented in 1989."),
    (Category.TECHNOLOGY, _L2, "The average smartphone has more computing power than all of NASA in 1969."),
    (Category.TECHNOLOGY, _L2, "About 90% of the world's currency exists only digitally."),
    (Category.TECHNOLOGY, _L3, "The QWERTY keyboard layout was designed to keep typewriter type bars from jamming."),
    (Category.TECHNOLOGY, _L3, "The first 1GB hard drive, introduced in 1980, weighed over 500 pounds and cost $40,000."),
)

CORPUS: tuple[Factlet, ...] = tuple(
    Factlet(id=f"F{index:03d}", text=text, category=category, level=level)
    for index, (category, level, text) in enumerate(_RAW, start=1)
)

_BY_ID: dict[str, Factlet] = {factlet.id: factlet for factlet in CORPUS}


def get_factlet(factlet_id: str) -> Factlet | None:
    """Look up a corpus factlet by id."""
    return _BY_ID.get(factlet_id)


def random_factlet(rng: random.Random | None = None) -> Factlet:
    """Uniform pick over the whole corpus."""
    return (rng or random).choice(CORPUS)
