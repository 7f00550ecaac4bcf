"""
ECO opening table and opening-family map.

The built-in rows cover the common ECO codes. Additional codes can be read from
the lichess-org/chess-openings TSV files:

  ECO_TSV_PATH=data/eco python export.py --username hikaru --format text -o report.txt
"""

import csv
import logging
import re
from pathlib import Path

import chess

import settings
from models import OpeningRecord

logger = logging.getLogger(__name__)

RESULT_TOKENS = ("1-0", "0-1", "1/2-1/2", "*")

_ECO_ROWS = [
    # A00-A99: flank openings, irregular openings, Indian systems
    ("A00", "Polish Opening", "1.b4"),
    ("A01", "Nimzo-Larsen Attack", "1.b3"),
    ("A02", "Bird's Opening", "1.f4"),
    ("A03", "Bird's Opening: Dutch Variation", "1.f4 d5"),
    ("A04", "Réti Opening", "1.Nf3"),
    ("A05", "Réti Opening: King's Indian Attack", "1.Nf3 Nf6"),
    ("A06", "Réti Opening: Nimzowitsch-Larsen Attack", "1.Nf3 d5"),
    ("A07", "King's Indian Attack", "1.Nf3 d5 2.g3"),
    ("A08", "King's Indian Attack: French Variation", "1.Nf3 d5 2.g3 c5"),
    ("A09", "Réti Opening: Advance Variation", "1.Nf3 d5 2.c4"),
    ("A10", "English Opening", "1.c4"),
    ("A11", "English Opening: Caro-Kann Defensive System", "1.c4 c6"),
    ("A12", "English Opening: Caro-Kann Defensive System", "1.c4 c6 2.Nf3 d5"),
    ("A13", "English Opening: Agincourt Defense", "1.c4 e6"),
    ("A14", "English Opening: Agincourt Defense, Neo-Catalan", "1.c4 e6 2.Nf3 d5"),
    ("A15", "English Opening: Anglo-Indian Defense", "1.c4 Nf6"),
    ("A16", "English Opening: Anglo-Indian Defense, Anglo-Grünfeld Variation", "1.c4 Nf6 2.Nc3"),
    ("A17", "English Opening: Anglo-Indian Defense, Hedgehog System", "1.c4 Nf6 2.Nc3 e6"),
    ("A18", "English Opening: Mikenas-Carls Variation", "1.c4 Nf6 2.Nc3 e6 3.e4"),
    ("A19", "English Opening: Mikenas-Carls, Sicilian Variation", "1.c4 Nf6 2.Nc3 e6 3.e4 c5"),
    ("A20", "English Opening: King's English Variation", "1.c4 e5"),
    ("A21", "English Opening: King's English Variation, Reversed Sicilian", "1.c4 e5 2.Nc3"),
    ("A22", "English Opening: King's English Variation, Two Knights Variation", "1.c4 e5 2.Nc3 Nf6"),
    ("A23", "English Opening: King's English Variation, Closed System", "1.c4 e5 2.Nc3 Nc6"),
    ("A24", "English Opening: King's English Variation, Closed System", "1.c4 e5 2.Nc3 Nc6 3.g3"),
    ("A25", "English Opening: King's English Variation, Closed System", "1.c4 e5 2.Nc3 Nc6 3.g3 g6"),
    ("A26", "English Opening: King's English Variation, Closed System", "1.c4 e5 2.Nc3 Nc6 3.g3 g6 4.Bg2"),
    ("A27", "English Opening: King's English Variation, Three Knights System", "1.c4 e5 2.Nc3 Nc6 3.Nf3"),
    ("A28", "English Opening: King's English Variation, Four Knights System", "1.c4 e5 2.Nc3 Nc6 3.Nf3 Nf6"),
    ("A29", "English Opening: King's English Variation, Four Knights, Fianchetto Variation",
     "1.c4 e5 2.Nc3 Nc6 3.Nf3 Nf6 4.g3"),
    ("A30", "English Opening: Symmetrical Variation", "1.c4 c5"),
    ("A40", "Queen's Pawn Game", "1.d4 e6"),
    ("A45", "Indian Defense", "1.d4 Nf6"),
    ("A57", "Benko Gambit", "1.d4 Nf6 2.c4 c5 3.d5 b5"),
    ("A60", "Benoni Defense: Modern Variation", "1.d4 Nf6 2.c4 c5 3.d5 e6"),
    ("A80", "Dutch Defense", "1.d4 f5"),
    ("A87", "Dutch Defense: Leningrad Variation", "1.d4 f5 2.c4 Nf6 3.g3 g6 4.Bg2 Bg7 5.Nf3"),
    # B00-B99: semi-open games other than the French Defense
    ("B00", "King's Pawn Game", "1.e4"),
    ("B01", "Scandinavian Defense", "1.e4 d5"),
    ("B02", "Alekhine's Defense", "1.e4 Nf6"),
    ("B03", "Alekhine's Defense: Four Pawns Attack", "1.e4 Nf6 2.e5 Nd5 3.d4"),
    ("B04", "Alekhine's Defense: Modern Variation", "1.e4 Nf6 2.e5 Nd5 3.d4 d6"),
    ("B05", "Alekhine's Defense: Modern Variation", "1.e4 Nf6 2.e5 Nd5 3.d4 d6 4.Nf3"),
    ("B06", "Robatsch Defense", "1.e4 g6"),
    ("B07", "Pirc Defense", "1.e4 d6"),
    ("B08", "Pirc Defense: Classical System", "1.e4 d6 2.d4 Nf6 3.Nc3"),
    ("B09", "Pirc Defense: Austrian Attack", "1.e4 d6 2.d4 Nf6 3.Nc3 g6 4.f4"),
    ("B10", "Caro-Kann Defense", "1.e4 c6"),
    ("B11", "Caro-Kann Defense: Two Knights Attack", "1.e4 c6 2.Nc3"),
    ("B12", "Caro-Kann Defense: Advance Variation", "1.e4 c6 2.d4 d5 3.e5"),
    ("B13", "Caro-Kann Defense: Exchange Variation", "1.e4 c6 2.d4 d5 3.exd5"),
    ("B14", "Caro-Kann Defense: Panov-Botvinnik Attack", "1.e4 c6 2.d4 d5 3.exd5 cxd5 4.c4"),
    ("B15", "Caro-Kann Defense: Main Line", "1.e4 c6 2.d4 d5 3.Nc3"),
    ("B16", "Caro-Kann Defense: Bronstein-Larsen Variation", "1.e4 c6 2.d4 d5 3.Nc3 dxe4 4.Nxe4 Nf6 5.Nxf6+ gxf6"),
    ("B17", "Caro-Kann Defense: Steinitz Variation", "1.e4 c6 2.d4 d5 3.Nc3 dxe4 4.Nxe4 Nd7"),
    ("B18", "Caro-Kann Defense: Classical Variation", "1.e4 c6 2.d4 d5 3.Nc3 dxe4 4.Nxe4 Bf5"),
    ("B19", "Caro-Kann Defense: Classical Variation, Spassky System",
     "1.e4 c6 2.d4 d5 3.Nc3 dxe4 4.Nxe4 Bf5 5.Ng3 Bg6 6.h4"),
    ("B20", "Sicilian Defense", "1.e4 c5"),
    ("B21", "Sicilian Defense: Smith-Morra Gambit", "1.e4 c5 2.d4"),
    ("B22", "Sicilian Defense: Alapin Variation", "1.e4 c5 2.c3"),
    ("B23", "Sicilian Defense: Closed Variation", "1.e4 c5 2.Nc3"),
    ("B24", "Sicilian Defense: Closed Variation", "1.e4 c5 2.Nc3 Nc6"),
    ("B25", "Sicilian Defense: Closed Variation", "1.e4 c5 2.Nc3 Nc6 3.g3"),
    ("B26", "Sicilian Defense: Closed Variation", "1.e4 c5 2.Nc3 Nc6 3.g3 g6"),
    ("B27", "Sicilian Defense: Hungarian Variation", "1.e4 c5 2.Nf3 g6"),
    ("B28", "Sicilian Defense: O'Kelly Variation", "1.e4 c5 2.Nf3 a6"),
    ("B29", "Sicilian Defense: Nimzowitsch Variation", "1.e4 c5 2.Nf3 Nf6"),
    ("B30", "Sicilian Defense: Old Sicilian", "1.e4 c5 2.Nf3 Nc6"),
    ("B33", "Sicilian Defense: Lasker-Pelikan Variation", "1.e4 c5 2.Nf3 Nc6 3.d4 cxd4 4.Nxd4 Nf6"),
    ("B40", "Sicilian Defense: French Variation", "1.e4 c5 2.Nf3 e6"),
    ("B50", "Sicilian Defense: Modern Variations", "1.e4 c5 2.Nf3 d6"),
    ("B70", "Sicilian Defense: Dragon Variation", "1.e4 c5 2.Nf3 d6 3.d4 cxd4 4.Nxd4 Nf6 5.Nc3 g6"),
    ("B90", "Sicilian Defense: Najdorf Variation", "1.e4 c5 2.Nf3 d6 3.d4 cxd4 4.Nxd4 Nf6 5.Nc3 a6"),
    # C00-C99: French Defense and open games
    ("C00", "French Defense", "1.e4 e6"),
    ("C01", "French Defense: Exchange Variation", "1.e4 e6 2.d4 d5 3.exd5"),
    ("C02", "French Defense: Advance Variation", "1.e4 e6 2.d4 d5 3.e5"),
    ("C03", "French Defense: Tarrasch Variation", "1.e4 e6 2.d4 d5 3.Nd2"),
    ("C04", "French Defense: Tarrasch Variation, Guimard Main Line", "1.e4 e6 2.d4 d5 3.Nd2 Nc6"),
    ("C05", "French Defense: Tarrasch Variation, Closed System", "1.e4 e6 2.d4 d5 3.Nd2 Nf6"),
    ("C06", "French Defense: Tarrasch Variation, Closed System", "1.e4 e6 2.d4 d5 3.Nd2 Nf6 4.e5 Nfd7"),
    ("C07", "French Defense: Tarrasch Variation, Open System", "1.e4 e6 2.d4 d5 3.Nd2 c5"),
    ("C08", "French Defense: Tarrasch Variation, Open System", "1.e4 e6 2.d4 d5 3.Nd2 c5 4.exd5 exd5"),
    ("C09", "French Defense: Tarrasch Variation, Open System",
     "1.e4 e6 2.d4 d5 3.Nd2 c5 4.exd5 exd5 5.Ngf3 Nc6"),
    ("C10", "French Defense: Paulsen Variation", "1.e4 e6 2.d4 d5 3.Nc3"),
    ("C11", "French Defense: Classical Variation", "1.e4 e6 2.d4 d5 3.Nc3 Nf6"),
    ("C12", "French Defense: MacCutcheon Variation", "1.e4 e6 2.d4 d5 3.Nc3 Nf6 4.Bg5 Bb4"),
    ("C13", "French Defense: Classical Variation, Alekhine-Chatard Attack",
     "1.e4 e6 2.d4 d5 3.Nc3 Nf6 4.Bg5 Be7 5.e5 Nfd7 6.h4"),
    ("C14", "French Defense: Classical Variation, Steinitz Variation",
     "1.e4 e6 2.d4 d5 3.Nc3 Nf6 4.Bg5 Be7 5.e5 Nfd7 6.Bxe7 Qxe7"),
    ("C15", "French Defense: Winawer Variation", "1.e4 e6 2.d4 d5 3.Nc3 Bb4"),
    ("C16", "French Defense: Winawer Variation, Advance Line", "1.e4 e6 2.d4 d5 3.Nc3 Bb4 4.e5"),
    ("C17", "French Defense: Winawer Variation, Advance Line", "1.e4 e6 2.d4 d5 3.Nc3 Bb4 4.e5 c5"),
    ("C18", "French Defense: Winawer Variation, Advance Line", "1.e4 e6 2.d4 d5 3.Nc3 Bb4 4.e5 c5 5.a3 Bxc3+"),
    ("C19", "French Defense: Winawer Variation, Advance Line",
     "1.e4 e6 2.d4 d5 3.Nc3 Bb4 4.e5 c5 5.a3 Bxc3+ 6.bxc3 Ne7"),
    ("C20", "King's Pawn Game", "1.e4 e5"),
    ("C21", "Center Game", "1.e4 e5 2.d4 exd4"),
    ("C23", "Bishop's Opening", "1.e4 e5 2.Bc4"),
    ("C25", "Vienna Game", "1.e4 e5 2.Nc3"),
    ("C30", "King's Gambit", "1.e4 e5 2.f4"),
    ("C33", "King's Gambit Accepted", "1.e4 e5 2.f4 exf4"),
    ("C40", "King's Knight Opening", "1.e4 e5 2.Nf3"),
    ("C41", "Philidor Defense", "1.e4 e5 2.Nf3 d6"),
    ("C42", "Petrov's Defense", "1.e4 e5 2.Nf3 Nf6"),
    ("C44", "King's Pawn Game: Tayler Opening", "1.e4 e5 2.Nf3 Nc6"),
    ("C45", "Scotch Game", "1.e4 e5 2.Nf3 Nc6 3.d4 exd4 4.Nxd4"),
    ("C46", "Three Knights Opening", "1.e4 e5 2.Nf3 Nc6 3.Nc3"),
    ("C47", "Four Knights Game", "1.e4 e5 2.Nf3 Nc6 3.Nc3 Nf6"),
    ("C50", "Italian Game", "1.e4 e5 2.Nf3 Nc6 3.Bc4"),
    ("C51", "Italian Game: Evans Gambit", "1.e4 e5 2.Nf3 Nc6 3.Bc4 Bc5 4.b4"),
    ("C53", "Italian Game: Classical Variation", "1.e4 e5 2.Nf3 Nc6 3.Bc4 Bc5 4.c3"),
    ("C55", "Italian Game: Two Knights Defense", "1.e4 e5 2.Nf3 Nc6 3.Bc4 Nf6"),
    ("C57", "Italian Game: Two Knights Defense, Knight Attack", "1.e4 e5 2.Nf3 Nc6 3.Bc4 Nf6 4.Ng5"),
    ("C60", "Ruy Lopez", "1.e4 e5 2.Nf3 Nc6 3.Bb5"),
    ("C65", "Ruy Lopez: Berlin Defense", "1.e4 e5 2.Nf3 Nc6 3.Bb5 Nf6"),
    ("C68", "Ruy Lopez: Exchange Variation", "1.e4 e5 2.Nf3 Nc6 3.Bb5 a6 4.Bxc6"),
    ("C84", "Ruy Lopez: Closed", "1.e4 e5 2.Nf3 Nc6 3.Bb5 a6 4.Ba4 Nf6 5.O-O Be7"),
    # D00-D99: closed games and Queen's Gambit
    ("D00", "Queen's Pawn Game", "1.d4"),
    ("D01", "Richter-Veresov Attack", "1.d4 Nf6 2.Nc3"),
    ("D02", "Queen's Pawn Game: London System", "1.d4 d5 2.Nf3 Nf6 3.Bf4"),
    ("D03", "Torre Attack", "1.d4 Nf6 2.Nf3 e6 3.Bg5"),
    ("D04", "Queen's Pawn Game: Colle System", "1.d4 Nf6 2.Nf3 e6 3.e3"),
    ("D05", "Queen's Pawn Game: Colle System", "1.d4 Nf6 2.Nf3 e6 3.e3 c5"),
    ("D06", "Queen's Gambit Declined", "1.d4 d5 2.c4"),
    ("D07", "Queen's Gambit Declined: Chigorin Defense", "1.d4 d5 2.c4 Nc6"),
    ("D08", "Queen's Gambit Declined: Albin Countergambit", "1.d4 d5 2.c4 e5"),
    ("D09", "Queen's Gambit Declined: Albin Countergambit", "1.d4 d5 2.c4 e5 3.dxe5 d4"),
    ("D10", "Queen's Gambit Declined: Slav Defense", "1.d4 d5 2.c4 c6"),
    ("D11", "Queen's Gambit Declined: Slav Defense", "1.d4 d5 2.c4 c6 3.Nf3"),
    ("D12", "Queen's Gambit Declined: Slav Defense", "1.d4 d5 2.c4 c6 3.Nf3 Nf6"),
    ("D13", "Queen's Gambit Declined: Slav Defense, Exchange Variation", "1.d4 d5 2.c4 c6 3.Nf3 Nf6 4.cxd5"),
    ("D14", "Queen's Gambit Declined: Slav Defense, Exchange Variation",
     "1.d4 d5 2.c4 c6 3.Nf3 Nf6 4.cxd5 cxd5"),
    ("D15", "Queen's Gambit Declined: Slav Defense, Four Knights Variation", "1.d4 d5 2.c4 c6 3.Nf3 Nf6 4.Nc3"),
    ("D16", "Queen's Gambit Declined: Slav Defense, Steiner Variation",
     "1.d4 d5 2.c4 c6 3.Nf3 Nf6 4.Nc3 dxc4"),
    ("D17", "Queen's Gambit Declined: Slav Defense, Czech Variation",
     "1.d4 d5 2.c4 c6 3.Nf3 Nf6 4.Nc3 dxc4 5.a4"),
    ("D18", "Queen's Gambit Declined: Slav Defense, Dutch Variation",
     "1.d4 d5 2.c4 c6 3.Nf3 Nf6 4.Nc3 dxc4 5.a4 Bf5"),
    ("D19", "Queen's Gambit Declined: Slav Defense, Dutch Variation",
     "1.d4 d5 2.c4 c6 3.Nf3 Nf6 4.Nc3 dxc4 5.a4 Bf5 6.e3"),
    ("D20", "Queen's Gambit Accepted", "1.d4 d5 2.c4 dxc4"),
    ("D30", "Queen's Gambit Declined: Orthodox Defense", "1.d4 d5 2.c4 e6"),
    ("D35", "Queen's Gambit Declined: Exchange Variation", "1.d4 d5 2.c4 e6 3.Nc3 Nf6 4.cxd5"),
    ("D43", "Semi-Slav Defense", "1.d4 d5 2.c4 c6 3.Nf3 Nf6 4.Nc3 e6"),
    ("D80", "Grünfeld Defense", "1.d4 Nf6 2.c4 g6 3.Nc3 d5"),
    ("D85", "Grünfeld Defense: Exchange Variation", "1.d4 Nf6 2.c4 g6 3.Nc3 d5 4.cxd5 Nxd5"),
    # E00-E99: Indian defenses
    ("E00", "Queen's Pawn Game", "1.d4 Nf6"),
    ("E01", "Catalan Opening", "1.d4 Nf6 2.c4 e6 3.g3"),
    ("E02", "Catalan Opening: Open Defense", "1.d4 Nf6 2.c4 e6 3.g3 d5 4.Bg2 dxc4"),
    ("E03", "Catalan Opening: Open Defense", "1.d4 Nf6 2.c4 e6 3.g3 d5 4.Bg2 dxc4 5.Qa4+"),
    ("E04", "Catalan Opening: Open Defense", "1.d4 Nf6 2.c4 e6 3.g3 d5 4.Bg2 dxc4 5.Nf3"),
    ("E05", "Catalan Opening: Open Defense, Classical Line", "1.d4 Nf6 2.c4 e6 3.g3 d5 4.Bg2 dxc4 5.Nf3 Be7"),
    ("E06", "Catalan Opening: Closed Defense", "1.d4 Nf6 2.c4 e6 3.g3 d5 4.Bg2 Be7"),
    ("E07", "Catalan Opening: Closed Defense", "1.d4 Nf6 2.c4 e6 3.g3 d5 4.Bg2 Be7 5.Nf3"),
    ("E08", "Catalan Opening: Closed Defense", "1.d4 Nf6 2.c4 e6 3.g3 d5 4.Bg2 Be7 5.Nf3 O-O"),
    ("E09", "Catalan Opening: Closed Defense", "1.d4 Nf6 2.c4 e6 3.g3 d5 4.Bg2 Be7 5.Nf3 O-O 6.O-O Nbd7"),
    ("E10", "Queen's Pawn Game: Blumenfeld Countergambit", "1.d4 Nf6 2.c4 e6 3.Nf3"),
    ("E11", "Bogo-Indian Defense", "1.d4 Nf6 2.c4 e6 3.Nf3 Bb4+"),
    ("E12", "Queen's Indian Defense", "1.d4 Nf6 2.c4 e6 3.Nf3 b6"),
    ("E13", "Queen's Indian Defense: Fianchetto Variation", "1.d4 Nf6 2.c4 e6 3.Nf3 b6 4.g3"),
    ("E14", "Queen's Indian Defense: Fianchetto Variation", "1.d4 Nf6 2.c4 e6 3.Nf3 b6 4.g3 Bb7"),
    ("E15", "Queen's Indian Defense: Nimzowitsch Variation", "1.d4 Nf6 2.c4 e6 3.Nf3 b6 4.g3 Bb7 5.Bg2 Be7"),
    ("E16", "Queen's Indian Defense: Capablanca Variation", "1.d4 Nf6 2.c4 e6 3.Nf3 b6 4.g3 Bb7 5.Bg2 Bb4+"),
    ("E17", "Queen's Indian Defense: Traditional Variation",
     "1.d4 Nf6 2.c4 e6 3.Nf3 b6 4.g3 Bb7 5.Bg2 Be7 6.O-O"),
    ("E18", "Queen's Indian Defense: Old Main Line",
     "1.d4 Nf6 2.c4 e6 3.Nf3 b6 4.g3 Bb7 5.Bg2 Be7 6.O-O O-O"),
    ("E19", "Queen's Indian Defense: Old Main Line",
     "1.d4 Nf6 2.c4 e6 3.Nf3 b6 4.g3 Bb7 5.Bg2 Be7 6.O-O O-O 7.Nc3 Ne4"),
    ("E20", "Nimzo-Indian Defense", "1.d4 Nf6 2.c4 e6 3.Nc3 Bb4"),
    ("E32", "Nimzo-Indian Defense: Classical Variation", "1.d4 Nf6 2.c4 e6 3.Nc3 Bb4 4.Qc2"),
    ("E40", "Nimzo-Indian Defense: Normal Variation", "1.d4 Nf6 2.c4 e6 3.Nc3 Bb4 4.e3"),
    ("E60", "King's Indian Defense", "1.d4 Nf6 2.c4 g6"),
    ("E90", "King's Indian Defense: Normal Variation", "1.d4 Nf6 2.c4 g6 3.Nc3 Bg7 4.e4 d6 5.Nf3"),
]

# Family name -> every named line collapsed into it. Order matters: the
# family collapse scans these in order when looking for an unlisted variation.
_FAMILY_MEMBERS = {
    "Caro-Kann Defense": [
        "Caro-Kann Defense",
        "Caro-Kann Defense: Two Knights Attack",
        "Caro-Kann Defense: Advance Variation",
        "Caro-Kann Defense: Exchange Variation",
        "Caro-Kann Defense: Panov-Botvinnik Attack",
        "Caro-Kann Defense: Main Line",
        "Caro-Kann Defense: Bronstein-Larsen Variation",
        "Caro-Kann Defense: Steinitz Variation",
        "Caro-Kann Defense: Classical Variation",
        "Caro-Kann Defense: Classical Variation, Spassky System",
    ],
    "Sicilian Defense": [
        "Sicilian Defense",
        "Sicilian Defense: Smith-Morra Gambit",
        "Sicilian Defense: Alapin Variation",
        "Sicilian Defense: Closed Variation",
        "Sicilian Defense: Hungarian Variation",
        "Sicilian Defense: O'Kelly Variation",
        "Sicilian Defense: Nimzowitsch Variation",
        "Sicilian Defense: Old Sicilian",
        "Sicilian Defense: Lasker-Pelikan Variation",
        "Sicilian Defense: French Variation",
        "Sicilian Defense: Modern Variations",
        "Sicilian Defense: Dragon Variation",
        "Sicilian Defense: Najdorf Variation",
    ],
    "French Defense": [
        "French Defense",
        "French Defense: Exchange Variation",
        "French Defense: Advance Variation",
        "French Defense: Tarrasch Variation",
        "French Defense: Tarrasch Variation, Guimard Main Line",
        "French Defense: Tarrasch Variation, Closed System",
        "French Defense: Tarrasch Variation, Open System",
        "French Defense: Paulsen Variation",
        "French Defense: Classical Variation",
        "French Defense: MacCutcheon Variation",
        "French Defense: Classical Variation, Alekhine-Chatard Attack",
        "French Defense: Classical Variation, Steinitz Variation",
        "French Defense: Winawer Variation",
        "French Defense: Winawer Variation, Advance Line",
    ],
    "Queen's Gambit": [
        "Queen's Gambit Declined",
        "Queen's Gambit Declined: Chigorin Defense",
        "Queen's Gambit Declined: Albin Countergambit",
        "Queen's Gambit Declined: Slav Defense",
        "Queen's Gambit Declined: Slav Defense, Exchange Variation",
        "Queen's Gambit Declined: Slav Defense, Four Knights Variation",
        "Queen's Gambit Declined: Slav Defense, Steiner Variation",
        "Queen's Gambit Declined: Slav Defense, Czech Variation",
        "Queen's Gambit Declined: Slav Defense, Dutch Variation",
        "Queen's Gambit Declined: Orthodox Defense",
        "Queen's Gambit Declined: Exchange Variation",
        "Queen's Gambit Accepted",
    ],
    "English Opening": [
        "English Opening",
        "English Opening: Caro-Kann Defensive System",
        "English Opening: Agincourt Defense",
        "English Opening: Agincourt Defense, Neo-Catalan",
        "English Opening: Anglo-Indian Defense",
        "English Opening: Anglo-Indian Defense, Anglo-Grünfeld Variation",
        "English Opening: Anglo-Indian Defense, Hedgehog System",
        "English Opening: Mikenas-Carls Variation",
        "English Opening: Mikenas-Carls, Sicilian Variation",
        "English Opening: King's English Variation",
        "English Opening: King's English Variation, Reversed Sicilian",
        "English Opening: King's English Variation, Two Knights Variation",
        "English Opening: King's English Variation, Closed System",
        "English Opening: King's English Variation, Three Knights System",
        "English Opening: King's English Variation, Four Knights System",
        "English Opening: King's English Variation, Four Knights, Fianchetto Variation",
        "English Opening: Symmetrical Variation",
    ],
    "Alekhine's Defense": [
        "Alekhine's Defense",
        "Alekhine's Defense: Four Pawns Attack",
        "Alekhine's Defense: Modern Variation",
    ],
    "Pirc Defense": [
        "Pirc Defense",
        "Pirc Defense: Classical System",
        "Pirc Defense: Austrian Attack",
    ],
    "Réti Opening": [
        "Réti Opening",
        "Réti Opening: King's Indian Attack",
        "Réti Opening: Nimzowitsch-Larsen Attack",
        "Réti Opening: Advance Variation",
    ],
    "Bird's Opening": [
        "Bird's Opening",
        "Bird's Opening: Dutch Variation",
    ],
    "Nimzo-Indian Defense": [
        "Nimzo-Indian Defense",
        "Nimzo-Indian Defense: Classical Variation",
        "Nimzo-Indian Defense: Normal Variation",
    ],
    "Queen's Indian Defense": [
        "Queen's Indian Defense",
        "Queen's Indian Defense: Fianchetto Variation",
        "Queen's Indian Defense: Nimzowitsch Variation",
        "Queen's Indian Defense: Capablanca Variation",
        "Queen's Indian Defense: Traditional Variation",
        "Queen's Indian Defense: Old Main Line",
    ],
    "Catalan Opening": [
        "Catalan Opening",
        "Catalan Opening: Open Defense",
        "Catalan Opening: Open Defense, Classical Line",
        "Catalan Opening: Closed Defense",
    ],
    "King's Indian Attack": [
        "King's Indian Attack",
        "King's Indian Attack: French Variation",
    ],
    "Scandinavian Defense": [
        "Scandinavian Defense",
        "Scandinavian Defense: Mieses-Kotroc Variation",
        "Scandinavian Defense: Modern Variation",
    ],
    "Italian Game": [
        "Italian Game",
        "Italian Game: Evans Gambit",
        "Italian Game: Classical Variation",
        "Italian Game: Two Knights Defense",
        "Italian Game: Two Knights Defense, Knight Attack",
    ],
    "Ruy Lopez": [
        "Ruy Lopez",
        "Ruy Lopez: Berlin Defense",
        "Ruy Lopez: Exchange Variation",
        "Ruy Lopez: Closed",
    ],
    "King's Gambit": [
        "King's Gambit",
        "King's Gambit Accepted",
    ],
    "Grünfeld Defense": [
        "Grünfeld Defense",
        "Grünfeld Defense: Exchange Variation",
    ],
    "King's Indian Defense": [
        "King's Indian Defense",
        "King's Indian Defense: Normal Variation",
    ],
    "Dutch Defense": [
        "Dutch Defense",
        "Dutch Defense: Leningrad Variation",
    ],
}

OPENING_FAMILIES: dict[str, str] = {
    member: family for family, members in _FAMILY_MEMBERS.items() for member in members
}


def parse_pgn_moves(pgn: str) -> list[str]:
    """
    Parse PGN move string (e.g. "1. e4 e5 2. Nf3 Nc6") into list of SAN moves.
    """
    moves = []
    # chess.com move text carries {[%clk ...]} comments
    pgn = re.sub(r"\{[^}]*\}|\([^)]*\)", " ", pgn)
    for token in pgn.split():
        token = token.strip()
        if not token:
            continue
        if token.startswith("{") or token.startswith("("):
            continue
        if re.match(r"^\d+\.+$", token):
            continue
        if re.match(r"^\d+\.", token):
            token = re.sub(r"^\d+\.+", "", token)
        if token and token not in RESULT_TOKENS:
            moves.append(token)
    return moves


def load_eco_tsv(source: str | Path) -> dict[str, OpeningRecord]:
    """
    Read lichess chess-openings TSV rows (eco, name, pgn). Returns the first
    replayable row per ECO code.
    """
    source = Path(source)
    if source.is_dir():
        tsv_files = sorted(source.glob("*.tsv"))
    else:
        tsv_files = [source]
    if not tsv_files:
        raise FileNotFoundError(f"No TSV files found in {source}")

    records: dict[str, OpeningRecord] = {}
    for tsv_path in tsv_files:
        with open(tsv_path, encoding="utf-8") as f:
            reader = csv.DictReader(f, delimiter="\t")
            for row in reader:
                eco = (row.get("eco") or "").strip()
                name = (row.get("name") or "").strip()
                pgn = (row.get("pgn") or "").strip()
                if not eco or not name or not pgn or eco in records:
                    continue

                moves = parse_pgn_moves(pgn)
                board = chess.Board()
                try:
                    for san in moves:
                        board.push_san(san)
                except ValueError as e:
                    logger.warning("Skipping %s %s: %s", eco, name, e)
                    continue
                if not moves:
                    continue

                records[eco] = OpeningRecord(code=eco, name=name, moves=pgn)
    return records


def _build_table() -> dict[str, OpeningRecord]:
    table = {code: OpeningRecord(code, name, moves) for code, name, moves in _ECO_ROWS}
    if settings.ECO_TSV_PATH:
        for code, record in load_eco_tsv(settings.ECO_TSV_PATH).items():
            table.setdefault(code, record)
    return table


ECO_OPENINGS: dict[str, OpeningRecord] = _build_table()


def opening_name(eco_code: str) -> str:
    """Canonical name for an ECO code; "ECO <code>" when the code is not in the table."""
    record = ECO_OPENINGS.get(eco_code)
    return record.name if record else f"ECO {eco_code}"


def opening_by_moves(moves: str) -> OpeningRecord | None:
    """Table entry whose move sequence is the longest prefix of `moves`."""
    played = parse_pgn_moves(moves)
    if not played:
        return None

    best = None
    best_len = 0
    for record in ECO_OPENINGS.values():
        if not record.moves:
            continue
        prefix = parse_pgn_moves(record.moves)
        if len(prefix) > best_len and played[: len(prefix)] == prefix:
            best, best_len = record, len(prefix)
    return best
